from __future__ import annotations

# Table-of-contents extraction prompt shared by every vision backend. The
# reply format here is what parsing.parse_model_response expects.
TOC_EXTRACTION_PROMPT = """\
You are cataloguing the table-of-contents pages of a video game magazine.
The images are consecutive pages of one issue; read them in order and list
every article. Keep titles and author names in their original language
(usually Traditional Chinese).

Reply with JSON only, in this shape:

```json
{
  "articles": [
    {
      "title": "Article title",
      "subtitle": "Subtitle, if any",
      "authors": ["Author"],
      "category": "Section / column name",
      "pageStart": 12,
      "pageEnd": 15,
      "summary": "One-line summary if the page suggests one",
      "suggestedTags": [{"name": "Tag", "type": "GENERAL"}],
      "suggestedGames": ["Game name"],
      "confidence": 0.95
    }
  ],
  "metadata": {
    "issueTitle": "Cover feature, if any",
    "publishDate": "YYYY-MM-DD, if printed",
    "pageInfo": "Anything else about the pages"
  }
}
```

Tag types are GENERAL, PERSON, EVENT, SERIES, COMPANY or PLATFORM. When a
title names a game, also put that game in suggestedGames. Omit fields you
cannot read instead of guessing; use confidence to say how sure you are.
"""
