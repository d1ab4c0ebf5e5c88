import json

from tocr.services.ocr.parsing import parse_model_response


def test_fenced_json_is_extracted():
    text = (
        "Here you go:\n```json\n"
        + json.dumps(
            {
                "articles": [
                    {
                        "title": "Cover story",
                        "authors": ["Alice", None, ""],
                        "pageStart": 12,
                        "pageEnd": "18",
                        "suggestedTags": [
                            {"name": "RPG", "type": "genre"},
                            {"name": "Nintendo", "type": "company"},
                            "E3",
                        ],
                        "suggestedGames": ["Zelda"],
                        "confidence": 0.95,
                    }
                ],
                "metadata": {"issueTitle": "Vol. 42", "publishDate": "2024-01"},
            }
        )
        + "\n```"
    )
    out = parse_model_response(text)

    assert out.raw_text == text
    (article,) = out.articles
    assert article.title == "Cover story"
    assert article.authors == ["Alice"]
    assert article.page_start == 12
    assert article.page_end == 18
    assert [(t.name, t.type) for t in article.suggested_tags] == [
        ("RPG", "GENERAL"),
        ("Nintendo", "COMPANY"),
        ("E3", "GENERAL"),
    ]
    assert article.suggested_games == ["Zelda"]
    assert article.confidence == 0.95
    assert out.metadata.issue_title == "Vol. 42"
    assert out.metadata.page_info is None


def test_bare_json_array_is_accepted():
    out = parse_model_response('[{"title": "A"}, "junk", {"title": "B", "confidence": "high"}]')
    assert [a.title for a in out.articles] == ["A", "B"]
    assert out.articles[1].confidence == 0.8
    assert out.metadata is None


def test_invalid_pages_and_confidence_are_normalized():
    out = parse_model_response(
        '{"articles": [{"title": "X", "pageStart": 0, "pageEnd": -3, "confidence": 7}]}'
    )
    (article,) = out.articles
    assert article.page_start is None
    assert article.page_end is None
    assert article.confidence == 1.0


def test_non_json_text_keeps_raw_text():
    out = parse_model_response("Sorry, I cannot read this image.")
    assert out.articles == []
    assert out.raw_text == "Sorry, I cannot read this image."


def test_broken_json_does_not_raise():
    out = parse_model_response('```json\n{"articles": [\n```')
    assert out.articles == []
    assert out.raw_text is not None


def test_empty_text():
    out = parse_model_response("")
    assert out.articles == []
