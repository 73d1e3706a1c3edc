from annotator.lines import (
    DEFAULT_SUPPRESSION_TOKEN,
    SourceLine,
    find_suppressed_lines,
    index_document,
    split_lines,
)


def test_split_lines_keeps_blank_lines_and_numbering():
    document = index_document("a: 1\n\n  \nb: 2\n")

    assert [line.line_number for line in document.lines] == [1, 2, 3, 4]
    assert document.lines[1] == SourceLine(2, "")
    assert document.lines[2].text == "  "
    assert document.line(4).text == "b: 2"


def test_split_lines_handles_mixed_newlines_without_trailing_line():
    assert split_lines("one\r\ntwo\rthree\nfour") == ["one", "two", "three", "four"]
    assert split_lines("one\n") == ["one"]
    assert split_lines("") == []


def test_bytes_input_is_decoded_and_bom_stripped():
    document = index_document("\ufeffResources: {}\n".encode("utf-8"))

    assert len(document) == 1
    assert document.lines[0].text == "Resources: {}"


def test_directive_marks_only_the_following_line():
    text = "\n".join(
        [
            "Resources:",
            f"  {DEFAULT_SUPPRESSION_TOKEN}",
            "  Queue:",
            "    Type: AWS::SQS::Queue",
        ]
    )

    document = index_document(text)

    assert document.suppressed == frozenset({3})


def test_directive_on_last_line_is_a_no_op():
    document = index_document(f"Resources: {{}}\n{DEFAULT_SUPPRESSION_TOKEN}\n")

    assert document.suppressed == frozenset()


def test_partial_or_differently_cased_directives_are_ignored():
    lines = [
        SourceLine(1, f"Key: value {DEFAULT_SUPPRESSION_TOKEN}"),
        SourceLine(2, DEFAULT_SUPPRESSION_TOKEN.upper()),
        SourceLine(3, "# guardrails: ignore-next-line"),
        SourceLine(4, "Key: value"),
        SourceLine(5, "Key: value"),
    ]

    assert find_suppressed_lines(lines) == frozenset()


def test_custom_token_is_honored():
    document = index_document("# skip\nA: 1\nB: 2\n", suppression_token="# skip")

    assert document.suppressed == frozenset({2})


def test_window_is_inclusive_and_clamped():
    document = index_document("a\nb\nc\n")

    assert [line.text for line in document.window(2, 3)] == ["b", "c"]
    assert [line.text for line in document.window(0, 10)] == ["a", "b", "c"]


def test_template_is_composed_lazily_with_positions():
    document = index_document("Resources:\n  Queue:\n    Type: AWS::SQS::Queue\n")

    root = document.template

    assert root is not None
    assert root.start_mark.line == 0
    assert document.template is root


def test_unicode_line_breaks_count_as_lines():
    assert split_lines("a\x85b\u2028c\u2029d\n") == ["a", "b", "c", "d"]


def test_invalid_utf8_bytes_are_replaced():
    document = index_document(b"Resources:\n  K: \xff\xfe\n")

    assert len(document) == 2
    assert document.line(2).text == "  K: \ufffd\ufffd"
