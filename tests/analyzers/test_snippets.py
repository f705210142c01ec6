"""Tests for declaration-biased snippet extraction."""

from __future__ import annotations

from readmegen.analyzers.snippets import SnippetExtractor, extract_snippet, line_priority


def test_short_file_returned_verbatim() -> None:
    text = "import os\n\nx = 1\n"
    assert SnippetExtractor(max_lines=3).extract(text, "a.py") == text


def test_line_priorities() -> None:
    assert line_priority("") == 1
    assert line_priority("   # comment") == 1
    assert line_priority("// comment") == 1
    assert line_priority("import os") == 15
    assert line_priority("export default App;") == 15
    assert line_priority("def handler(event):") == 15
    assert line_priority("const add = (a, b) => a + b;") == 15
    assert line_priority("app.listen(3000);") == 15
    assert line_priority("users.get('/users', list);") == 12
    assert line_priority("const User = mongoose.model('User', schema);") == 12
    assert line_priority("    if value:") == 9
    assert line_priority("    return result") == 9
    assert line_priority("total = 0") == 7
    assert line_priority("print(total)") == 5


def test_long_file_keeps_top_lines_in_source_order() -> None:
    lines = []
    for index in range(20):
        lines.append(f"print({index})")
        lines.append(f"def fn{index}():")
    text = "\n".join(lines)

    result = SnippetExtractor(max_lines=10).extract(text, "module.py").splitlines()

    assert len(result) == 10
    assert result == [f"def fn{index}():" for index in range(10)]


def test_output_preserves_original_order() -> None:
    source = [f"value{index} = {index}" if index % 3 else f"import mod{index}" for index in range(60)]
    result = extract_snippet("\n".join(source), "x.py", max_lines=25).splitlines()

    positions = [source.index(line) for line in result]
    assert len(result) == 25
    assert positions == sorted(positions)


def test_config_files_are_head_truncated() -> None:
    text = "\n".join(f"line{index}" for index in range(400))
    result = SnippetExtractor(max_lines=300).extract(text, "deploy/Dockerfile")
    assert result.splitlines() == [f"line{index}" for index in range(150)]


def test_only_newlines_count_as_line_breaks() -> None:
    # Form feeds and Unicode separators are content, not line breaks.
    text = "".join(f"line {index}\x0c\u2028\n" for index in range(10))
    assert SnippetExtractor(10).extract(text, "notes.js") == text
