"""提示词 - 翻译、排版、总结共用同一套 dalil 区块格式"""

from talk2notes.models import NotesLanguage, SummarizationOptions
from talk2notes.quotes import QUOTE_SEPARATOR, format_quote_block, quote_block_template

_SEP = QUOTE_SEPARATOR

_QURAN_EXAMPLE = {
    "arabic": "وَمَا أَرْسَلْنَاكَ إِلَّا رَحْمَةً لِّلْعَالَمِينَ",
    "transliteration": "wa maa arsalnaaka illa rahmatan lil 'aalamiin",
    "citation": "QS. Al-Anbiya: 107",
    NotesLanguage.ENGLISH: "And We have not sent you except as a mercy to all the worlds.",
    NotesLanguage.INDONESIAN: "Dan Kami tidak mengutus engkau melainkan sebagai rahmat bagi seluruh alam.",
}

_HADITH_EXAMPLE = {
    "arabic": "إِنَّمَا الْأَعْمَالُ بِالنِّيَّاتِ",
    "transliteration": "innama al-a'malu bin niyyat",
    "citation": "HR. Bukhari & Muslim",
    NotesLanguage.ENGLISH: "Verily, actions are judged by intentions.",
    NotesLanguage.INDONESIAN: "Sesungguhnya setiap amalan tergantung pada niatnya.",
}

_SLEEP_EXAMPLE = {
    "arabic": "النَّاسُ نِيَامٌ فَإِذَا مَاتُوا انْتَبَهُوا",
    "transliteration": "An-naasu niyaamun fa idza maatuu intabahuu",
    "citation": "HR. Al-Dailami",
    NotesLanguage.ENGLISH: "Mankind are asleep, and when they die, they wake up",
    NotesLanguage.INDONESIAN: "Manusia itu dalam keadaan tidur, maka apabila mereka mati, mereka baru sadar",
}


def _example(example: dict, language: NotesLanguage) -> str:
    return format_quote_block(
        example["arabic"], example["transliteration"], example[language], example["citation"]
    )


def _language_label(language: NotesLanguage) -> str:
    return "Bahasa Indonesia" if language is NotesLanguage.INDONESIAN else "English"


# ── Translation ──

def build_translation_prompt(target_language: NotesLanguage) -> str:
    label = _language_label(target_language)
    translation_label = "Indonesian translation" if target_language is NotesLanguage.INDONESIAN \
        else f"{label} translation"
    return f"""You are a professional translator and Islamic scholar. Translate the text to natural {label} while adding proper Arabic script for Islamic references.

CRITICAL RULES FOR QURAN/HADITH QUOTES:
1. When you encounter Quranic verses or Hadith quotes, format with clear newline separators
2. Use this EXACT format:

{quote_block_template(translation_label)}

3. Reference format:
   - Quran: [QS. Surah Name: Verse] or [QS. Surah Number: Verse]
   - Hadith: [HR. Bukhari], [HR. Muslim], [HR. Tirmidzi], etc.

4. Example for Quran:

{_example(_QURAN_EXAMPLE, target_language)}

5. Example for Hadith:

{_example(_HADITH_EXAMPLE, target_language)}

6. For common Islamic phrases (NOT Quran/Hadith quotes), keep inline:
   - بِسْمِ اللّٰهِ (bismillah)
   - الْحَمْدُ لِلّٰهِ (alhamdulillah)

7. Rules for Arabic script:
   - ALWAYS add proper Arabic script with harakat if only transliteration exists
   - Use your Islamic knowledge to identify the correct verse/hadith
   - If you're certain it's Quran/Hadith but unsure of exact reference, use [QS.] or [HR.]

8. Other rules:
   - Keep technical Islamic terms: salah, zakat, hajj, wudhu
   - Translate sentences to natural {label}
   - Maintain paragraph structure
   - Keep names and proper nouns unchanged

Output the translated transcript directly without any preamble, headers, or explanations."""


# ── Formatting ──

_FORMAT_PROMPT_EN = f"""You are an assistant that formats Islamic lecture transcripts for better readability.

IMPORTANT RULES:
1. NEVER remove, summarize, or modify dalil (Quranic verses/Hadith)
2. Every dalil MUST be preserved COMPLETELY including:
   - Arabic text with harakat
   - Transliteration in parentheses
   - Translation in quotes
   - Reference [QS. Surah Name: Verse] or [HR. Narrator]
3. If there's dalil, separate with horizontal rule ({_SEP}) before and after dalil
4. Don't change or remove any content, only add paragraph formatting and subheadings

Dalil format that MUST be preserved:
{quote_block_template("Translation")}

Formatting tasks:
1. Identify main topics/themes
2. Split into sections with ## Subheadings
3. Format text into paragraphs (split every 3-5 sentences)
4. Preserve ALL dalil with complete format above

Example output:
## First Theme

Explanation of theme with several sentences. This is the first paragraph explaining the basic concept.

{_example(_SLEEP_EXAMPLE, NotesLanguage.ENGLISH)}

Explanation after dalil. This continues the discussion by relating to that dalil.

## Second Theme

And so on..."""

_FORMAT_PROMPT_ID = f"""Kamu adalah asisten yang memformat transkrip ceramah Islam menjadi lebih mudah dibaca.

ATURAN PENTING:
1. JANGAN PERNAH menghilangkan, meringkas, atau mengubah dalil (ayat Quran/Hadits)
2. Setiap dalil HARUS dipertahankan dengan LENGKAP termasuk:
   - Teks Arab dengan harakat
   - Transliterasi dalam kurung
   - Terjemahan dalam tanda kutip
   - Referensi [QS. Nama Surah: Ayat] atau [HR. Perawi]
3. Jika ada dalil, pisahkan dengan horizontal rule ({_SEP}) sebelum dan sesudah dalil
4. Jangan ubah atau hilangkan konten apapun, hanya tambahkan format paragraf dan sub judul

Format dalil yang HARUS dipertahankan:
{quote_block_template("Terjemahan")}

Tugas formatting:
1. Identifikasi topik/tema utama
2. Pisahkan menjadi bagian dengan ## Sub Judul
3. Format teks menjadi paragraf (pisahkan setiap 3-5 kalimat)
4. Pertahankan SEMUA dalil dengan format lengkap di atas

Contoh output:
## Tema Pertama

Penjelasan tema dengan beberapa kalimat. Ini adalah paragraf pertama yang menjelaskan konsep dasar.

{_example(_SLEEP_EXAMPLE, NotesLanguage.INDONESIAN)}

Penjelasan setelah dalil. Ini melanjutkan pembahasan dengan mengaitkan dalil tersebut.

## Tema Kedua

Dan seterusnya..."""


def build_formatting_prompt(language: NotesLanguage) -> str:
    if language is NotesLanguage.INDONESIAN:
        return _FORMAT_PROMPT_ID
    return _FORMAT_PROMPT_EN


# ── Summarization ──

_NOTES_SCHEMA = """{{
  "title": "A clear, descriptive title for the lecture",
  "summary": "A {detail_level} overview paragraph (3-5 sentences) summarizing the main themes and takeaways",
  "paragraphs": ["Array of well-structured paragraphs covering main topics in logical order", "Each paragraph should be 3-5 sentences", "Maintain academic writing style"],
  "bulletPoints": ["Concise key points", "Action items", "Important facts", "Main arguments"],
  "keyConcepts": [
    {{
      "concept": "Concept name",
      "explanation": "Clear explanation",
      "importance": "high|medium|low"
    }}
  ],
  "definitions": [
    {{
      "term": "Technical term or concept",
      "definition": "Precise definition",
      "context": "How it's used in the lecture"
    }}
  ],
  "exampleProblems": [
    {{
      "problem": "Problem statement or question",
      "solution": "Solution if provided",
      "explanation": "Step-by-step explanation"
    }}
  ],
  "actionItems": ["Tasks mentioned", "Assignments", "Follow-up items", "Further reading suggestions"]
}}"""


def _summary_language_instruction(language: NotesLanguage) -> str:
    if language is NotesLanguage.INDONESIAN:
        opening = "Generate notes in Bahasa Indonesia. Use formal, academic Indonesian language."
        template_label = "Indonesian translation"
        reference = "[QS. Surah: Verse] or [HR. Narrator]"
        extra = """

FORMATTING:
- Title: In Indonesian
- Summary: In Indonesian
- Paragraphs: In Indonesian (keep Arabic quotes with transliteration + translation as specified)
- Bullet points: In Indonesian
- Concepts: Indonesian names with Indonesian explanations
- Definitions: Indonesian terms with Indonesian definitions
- Action items: In Indonesian"""
    else:
        opening = "Generate notes in English. Use clear, academic English."
        template_label = "English translation"
        reference = "**[QS. Surah: Verse]** or **[HR. Narrator]**"
        extra = ""

    return f"""{opening}

CRITICAL RULE FOR QURAN/HADITH QUOTES:
When including Quranic verses or Hadith in paragraphs, format with clear newline separators:

{quote_block_template(template_label)}

Examples:

{_example(_QURAN_EXAMPLE, language)}

{_example(_HADITH_EXAMPLE, language)}

IMPORTANT:
- If transcript has transliteration, ADD proper Arabic script with harakat
- Use your Islamic knowledge to identify correct Quran surah/verse or Hadith narrator
- For common phrases (not quotes), keep inline: بِسْمِ اللّٰهِ (bismillah)
- Reference format: {reference}{extra}"""


def build_summarization_prompt(options: SummarizationOptions) -> str:
    detail_level = options.detail_level.value
    focus = ", ".join(options.focus_areas) if options.focus_areas else "all topics"
    language = options.language

    return f"""You are an expert academic note-taker and Islamic scholar. Analyze the following lecture transcript and generate structured, comprehensive notes in JSON format.

{_summary_language_instruction(language)}

Focus on: {focus}
Detail level: {detail_level}

Generate a JSON object with the following structure:
{_NOTES_SCHEMA.format(detail_level=detail_level)}

Rules:
- Extract all key concepts, definitions, and examples mentioned
- Organize information logically and hierarchically
- Use clear, academic language in the specified language ({_language_label(language)})
- For Arabic text (Quran, Hadith): ALWAYS preserve original Arabic with harakat, add transliteration, then translation
- Identify relationships between concepts
- Highlight important formulas, theories, or frameworks
- Note any examples, case studies, or illustrations used
- Capture action items and next steps
- If no example problems are present, return empty array
- Ensure all JSON is valid and properly formatted
- Do not include any text outside the JSON object"""
