"""Reply texts sent back to the sender, per locale."""

from ..models import CatalogItem, ItemDraft

DEFAULT_LOCALE = "en"

_TEXTS: dict[str, dict[str, str]] = {
    "en": {
        "field.name": "name",
        "field.price": "price",
        "field.available": "availability (yes/no)",
        "example.name": "Classic Burger",
        "example.price": "25",
        "example.available": "yes",
        "hint.name": "Send a non-empty name.",
        "hint.price": "Example: 25",
        "hint.available": "Reply: yes or no",
        "missing": "Missing: **{field}**\nExample: {example}\nSend the {field} now.",
        "invalid": "Invalid value for: **{field}**\n{hint}",
        "summary": "Name: {name}\nPrice: {price} {currency}\nAvailable: {available}",
        "confirm": "Please review:\n{summary}\n\nSend **confirm** or **cancel**.",
        "confirm_or_cancel": "Send **confirm** or **cancel**.",
        "yes": "yes",
        "no": "no",
        "done": "Done ✅",
        "cancelled": "Cancelled.",
        "insert_failed": "Failed to add item: {error}",
        "price_updated": "Price updated ✅",
        "price_failed": "Failed to update price: {error}",
        "item_enabled": "Item enabled ✅",
        "item_disabled": "Item disabled ✅",
        "toggle_failed": "Failed to update item: {error}",
        "no_matches": "No matching items found.",
        "search_line": "• {name} — {price} {currency} — {status}",
        "status.available": "available",
        "status.unavailable": "unavailable",
        "no_results": "No results.",
        "help": (
            "Sorry, I didn't understand that.\nExamples:\n"
            '- "add item name: Classic Burger price: 25 available: yes"\n'
            '- "edit price classic burger to 27"\n'
            '- "disable item burger"\n'
            '- "search for burger"'
        ),
        "already_processed": "This message was already processed ✅",
        "not_authorized": "Sorry, this number is not authorized.",
        "audio_unsupported": "🎙️ Voice notes are not supported yet. Please send text.",
        "text_only": 'Send text such as: "add item name: Burger price: 25 available: yes".',
        "unexpected_error": "An unexpected error occurred. Please try again later.",
    },
    "ar": {
        "field.name": "الاسم",
        "field.price": "السعر",
        "field.available": "التوافر (نعم/لا)",
        "example.name": "برجر كلاسيك",
        "example.price": "25",
        "example.available": "نعم",
        "hint.name": "أرسل اسمًا غير فارغ.",
        "hint.price": "مثال: 25",
        "hint.available": "اكتب: نعم أو لا",
        "missing": "المعلومة ناقصة: **{field}**\nمثال: {example}\nأرسل {field} الآن.",
        "invalid": "القيمة غير صحيحة لحقل: **{field}**\n{hint}",
        "summary": "الاسم: {name}\nالسعر: {price} {currency}\nمتاح: {available}",
        "confirm": "راجعت:\n{summary}\n\nأرسل: **تأكيد** أو **إلغاء**.",
        "confirm_or_cancel": "أرسل **تأكيد** أو **إلغاء**.",
        "yes": "نعم",
        "no": "لا",
        "done": "تم بنجاح ✅",
        "cancelled": "تم الإلغاء.",
        "insert_failed": "فشل الإضافة: {error}",
        "price_updated": "تم تعديل السعر ✅",
        "price_failed": "فشل التعديل: {error}",
        "item_enabled": "تم تفعيل الصنف ✅",
        "item_disabled": "تم إيقاف الصنف ✅",
        "toggle_failed": "فشل التحديث: {error}",
        "no_matches": "لم يتم العثور على أصناف مطابقة.",
        "search_line": "• {name} — {price} {currency} — {status}",
        "status.available": "متاح",
        "status.unavailable": "غير متاح",
        "no_results": "لا يوجد نتائج.",
        "help": (
            "لم أفهم الأمر.\nأمثلة:\n"
            '- "أضف صنف اسم: برجر سعر: 25 متاح: نعم"\n'
            '- "عدّل سعر برجر كلاسيك إلى 27"\n'
            '- "أوقف صنف برجر"\n'
            '- "ابحث عن برجر"'
        ),
        "already_processed": "تمت معالجة هذه الرسالة مسبقًا ✅",
        "not_authorized": "عذرًا، هذا الرقم غير مخوّل.",
        "audio_unsupported": "🎙️ أرسل نصًا أو فعّل التحويل الصوتي لاحقًا.",
        "text_only": 'أرسل نصًا مثل: "أضف صنف اسم: برجر سعر: 25 متاح: نعم".',
        "unexpected_error": "حدث خطأ غير متوقع. حاول لاحقًا.",
    },
}

SUPPORTED_LOCALES = tuple(_TEXTS)


class Replies:
    """Renders reply strings in one locale."""

    def __init__(self, locale: str = DEFAULT_LOCALE, currency: str = "QAR"):
        self.locale = locale if locale in _TEXTS else DEFAULT_LOCALE
        self._currency = currency
        self._t = _TEXTS[self.locale]

    def text(self, key: str, **kwargs) -> str:
        template = self._t[key]
        return template.format(**kwargs) if kwargs else template

    def missing(self, field: str) -> str:
        return self.text(
            "missing",
            field=self._t[f"field.{field}"],
            example=self._t[f"example.{field}"],
        )

    def invalid(self, field: str) -> str:
        return self.text(
            "invalid", field=self._t[f"field.{field}"], hint=self._t[f"hint.{field}"]
        )

    def confirm(self, draft: ItemDraft) -> str:
        summary = self.text(
            "summary",
            name=draft.name,
            price=draft.price,
            currency=self._currency,
            available=self._t["yes"] if draft.available else self._t["no"],
        )
        return self.text("confirm", summary=summary)

    def search_results(self, items: list[CatalogItem]) -> str:
        if not items:
            return self._t["no_results"]
        return "\n".join(
            self.text(
                "search_line",
                name=item.name,
                price=item.price,
                currency=self._currency,
                status=self._t[
                    "status.available" if item.available else "status.unavailable"
                ],
            )
            for item in items
        )
