from dataclasses import dataclass


@dataclass(frozen=True)
class LanguageConfig:
    code: str
    name: str
    native_name: str
    academic_instructions: str
    format_instructions: str


LANGUAGE_CONFIGS: dict[str, LanguageConfig] = {
    "en": LanguageConfig(
        code="en",
        name="English",
        native_name="English",
        academic_instructions="""Generate ALL content strictly in English.
Write in formal academic English suitable for BTEC education.
Use clear, professional language appropriate for educational guidance.
Do NOT mix languages. Do NOT translate from another language.
Write natively as an academic instructor would in English.""",
        format_instructions="""Use standard English academic formatting:
- References: Oxford style
- Tables: English headers and content
- Images: English captions and descriptions""",
    ),
    "ru": LanguageConfig(
        code="ru",
        name="Russian",
        native_name="Русский",
        academic_instructions="""Создавайте ВСЁ содержимое СТРОГО на русском языке.
Пишите на формальном академическом русском языке, подходящем для образования BTEC.
Используйте ясный, профессиональный язык, соответствующий образовательному руководству.
НЕ смешивайте языки. НЕ переводите с другого языка.
Пишите естественно, как писал бы академический преподаватель на русском языке.""",
        format_instructions="""Используйте стандартное академическое форматирование на русском языке:
- Ссылки: Оксфордский стиль (названия могут быть на английском, но описания на русском)
- Таблицы: Заголовки и содержание на русском
- Изображения: Подписи и описания на русском""",
    ),
    "uz": LanguageConfig(
        code="uz",
        name="Uzbek",
        native_name="O'zbekcha",
        academic_instructions="""BARCHA kontentni FAQAT o'zbek tilida yarating.
BTEC ta'limiga mos rasmiy akademik o'zbek tilida yozing.
Ta'lim yo'riqnomasi uchun mos aniq, professional til ishlating.
Tillarni ARALASHTIRMANG. Boshqa tildan TARJIMA QILMANG.
O'zbek tilida akademik o'qituvchi kabi tabiiy yozing.""",
        format_instructions="""O'zbek tilidagi standart akademik formatdan foydalaning:
- Havolalar: Oksford uslubi (nomlar ingliz tilida bo'lishi mumkin, lekin tavsiflar o'zbek tilida)
- Jadvallar: Sarlavhalar va tarkib o'zbek tilida
- Rasmlar: Taglavhalar va tavsiflar o'zbek tilida""",
    ),
    "es": LanguageConfig(
        code="es",
        name="Spanish",
        native_name="Español",
        academic_instructions="""Genere todo el contenido estrictamente en español.
Escriba en español académico formal adecuado para la educación BTEC.
Use un lenguaje claro y profesional apropiado para orientación educativa.
NO mezcle idiomas. NO traduzca de otro idioma.
Escriba de forma natural como lo haría un instructor académico en español.""",
        format_instructions="""Use formato académico estándar en español:
- Referencias: Estilo Oxford (los títulos pueden estar en inglés, pero las descripciones en español)
- Tablas: Encabezados y contenido en español
- Imágenes: Subtítulos y descripciones en español""",
    ),
}


def get_language_config(code: str) -> LanguageConfig:
    return LANGUAGE_CONFIGS.get(code, LANGUAGE_CONFIGS["en"])


def language_instructions(code: str) -> str:
    config = get_language_config(code)
    return f"""{config.academic_instructions}

{config.format_instructions}

CRITICAL: If you respond in the wrong language, your response will be discarded."""
