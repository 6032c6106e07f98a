"""Tests for parse(): block/path linking, fallbacks, collisions and ordering."""

import threading

import pytest

from unfence.models import ParsedFile
from unfence.parser import ParserOptions
from unfence.parser import looks_like_folder_tree
from unfence.parser import parse

FENCE = "```"


class TestDocumentedExamples:
    """The common reply shapes the parser has to handle."""

    def test_first_line_comment(self):
        text = f"""
Here is the code:
{FENCE}typescript
// parser.ts
export function test() {{
  console.log("hello");
}}
{FENCE}
    """

        result = parse(text)

        assert len(result.files) == 1
        assert result.files[0].path == "parser.ts"
        assert "// parser.ts" not in result.files[0].content
        assert result.files[0].content.startswith("export function test()")

    def test_explicit_block_header(self):
        result = parse(f"\n{FENCE}typescript:src/utils/helper.ts\nconst x = 1;\n{FENCE}\n    ")

        assert result.paths() == ["src/utils/helper.ts"]
        assert result.files[0].content == "const x = 1;"
        assert result.files[0].language == "typescript"

    def test_preceding_bold_file_name(self):
        text = f"\nCreate a file named **components/Button.tsx**:\n{FENCE}tsx\nexport const Button = () => <button />;\n{FENCE}\n"

        result = parse(text)

        assert result.paths() == ["components/Button.tsx"]

    def test_fallback_name_for_untitled_block(self):
        result = parse(f"\n{FENCE}css\n.class {{ color: red; }}\n{FENCE}\n    ")

        assert result.paths() == ["untitled_1.css"]
        assert result.files[0].language == "css"

    def test_shell_command_block_is_kept(self):
        result = parse(f"\nRun this command:\n{FENCE}bash\nnpm install react\n{FENCE}\n")

        assert result.paths() == ["untitled_1.sh"]
        assert result.files[0].content == "npm install react"

    def test_consecutive_heading_blocks(self):
        text = f"""
#### `components/JsonViewer.tsx`

Handles the raw JSON text area.

{FENCE}tsx
export function JsonViewer() {{}}
{FENCE}

#### `components/ConfigPreview.tsx`

Handles the visual list rendering.

{FENCE}tsx
export function ConfigPreview() {{}}
{FENCE}

Thank you
"""

        result = parse(text)

        assert result.paths() == ["components/ConfigPreview.tsx", "components/JsonViewer.tsx"]
        assert result.get("components/JsonViewer.tsx").content == "export function JsonViewer() {}"
        assert result.get("components/ConfigPreview.tsx").content == "export function ConfigPreview() {}"


class TestPriority:
    def test_header_beats_preceding_heading(self):
        text = f"### `src/from_heading.ts`\n{FENCE}ts:src/from_header.ts\nlet a;\n{FENCE}"

        result = parse(text)

        assert result.paths() == ["src/from_header.ts"]

    def test_header_beats_leading_comment(self):
        text = f"{FENCE}ts:a.ts\n// b.ts\nlet a;\n{FENCE}"

        result = parse(text)

        assert result.paths() == ["a.ts"]
        assert result.files[0].content == "// b.ts\nlet a;"

    def test_leading_comment_beats_heading(self):
        text = f"### `from_heading.py`\n{FENCE}python\n# from_comment.py\nx = 1\n{FENCE}"

        result = parse(text)

        assert result.paths() == ["from_comment.py"]

    def test_heading_repeating_header_path_is_not_reused(self):
        text = (
            f"### `src/app.py`\n{FENCE}python:src/app.py\nx = 1\n{FENCE}\n\n"
            f"{FENCE}python\ny = 2\n{FENCE}"
        )

        result = parse(text)

        assert result.paths() == ["src/app.py", "untitled_1.py"]


class TestTemporalLinking:
    def test_hint_after_block_is_used_when_none_before(self):
        text = f"{FENCE}python\nprint('hi')\n{FENCE}\nSave this as **hello.py**."

        result = parse(text)

        assert result.paths() == ["hello.py"]

    def test_reverse_order_convention(self):
        text = (
            f"{FENCE}python\na = 1\n{FENCE}\nSave as **a.py**\n\n"
            f"{FENCE}python\nb = 2\n{FENCE}\nSave as **b.py**\n"
        )

        result = parse(text)

        assert result.get("a.py").content == "a = 1"
        assert result.get("b.py").content == "b = 2"

    def test_each_hint_used_once(self):
        text = f"**only.py**\n{FENCE}python\na = 1\n{FENCE}\n{FENCE}python\nb = 2\n{FENCE}"

        result = parse(text)

        assert result.paths() == ["only.py", "untitled_1.py"]
        assert result.get("only.py").content == "a = 1"

    def test_forward_search_stops_at_next_block(self):
        text = (
            f"{FENCE}python\na = 1\n{FENCE}\n"
            f"{FENCE}python\nb = 2\n{FENCE}\n**late.py**"
        )

        result = parse(text)

        assert result.get("late.py").content == "b = 2"
        assert result.get("untitled_1.py").content == "a = 1"

    def test_language_mismatch_skips_hint(self):
        text = f"**style.css**\n{FENCE}python\nx = 1\n{FENCE}"

        result = parse(text)

        assert result.paths() == ["untitled_1.py"]

    def test_unknown_language_accepts_any_hint(self):
        text = f"**config/app.conf**\n{FENCE}nginx\nserver {{}}\n{FENCE}"

        result = parse(text)

        assert result.paths() == ["config/app.conf"]
        assert result.files[0].language == "nginx"

    def test_hint_inside_block_is_never_used(self):
        text = f"{FENCE}markdown\n**inner.py**\n{FENCE}\n{FENCE}python\nx = 1\n{FENCE}"

        result = parse(text)

        assert "inner.py" not in result.paths()


class TestFallbackAndCollisions:
    def test_fallback_counters_increase(self):
        text = "\n".join(f"{FENCE}python\nx = {i}\n{FENCE}" for i in range(3))

        result = parse(text)

        assert result.paths() == ["untitled_1.py", "untitled_2.py", "untitled_3.py"]
        assert [f.content for f in result.files] == ["x = 0", "x = 1", "x = 2"]

    def test_unknown_language_falls_back_to_txt(self):
        result = parse(f"{FENCE}brainfuck\n+++\n{FENCE}\n{FENCE}\nplain\n{FENCE}")

        assert result.paths() == ["untitled_1.txt", "untitled_2.txt"]
        assert result.get("untitled_1.txt").language == "brainfuck"
        assert result.get("untitled_2.txt").language == "text"

    def test_generated_file_stem(self):
        result = parse(f"{FENCE}js\nx\n{FENCE}", ParserOptions(fallback_stem="generated_file"))

        assert result.paths() == ["generated_file_1.js"]

    def test_fallback_skips_names_already_claimed(self):
        text = f"{FENCE}css:untitled_1.css\na {{}}\n{FENCE}\n{FENCE}css\nb {{}}\n{FENCE}"

        result = parse(text)

        assert result.paths() == ["untitled_1.css", "untitled_2.css"]
        assert result.get("untitled_1.css").content == "a {}"

    def test_duplicate_path_gets_suffix(self):
        text = f"{FENCE}ts:src/a.ts\nfirst\n{FENCE}\n{FENCE}ts:src/a.ts\nsecond\n{FENCE}\n{FENCE}ts:src/a.ts\nthird\n{FENCE}"

        result = parse(text)

        assert result.paths() == ["src/a.ts", "src/a_2.ts", "src/a_3.ts"]
        assert result.get("src/a.ts").content == "first"
        assert result.get("src/a_3.ts").content == "third"

    def test_duplicate_suffix_avoids_existing_path(self):
        text = f"{FENCE}ts:a.ts\n1\n{FENCE}\n{FENCE}ts:a.ts\n2\n{FENCE}\n{FENCE}ts:a_2.ts\n3\n{FENCE}"

        result = parse(text)

        assert result.paths() == ["a.ts", "a_2.ts", "a_3.ts"]
        assert result.get("a_2.ts").content == "3"
        assert result.get("a_3.ts").content == "2"

    def test_duplicate_extensionless_path(self):
        text = f"{FENCE}:Dockerfile\nFROM a\n{FENCE}\n{FENCE}:Dockerfile\nFROM b\n{FENCE}"

        result = parse(text)

        assert result.paths() == ["Dockerfile", "Dockerfile_2"]
        assert result.get("Dockerfile").language == "dockerfile"


class TestFolderStructure:
    def test_tree_block_is_set_aside(self, multi_file_reply):
        result = parse(multi_file_reply)

        assert result.folder_structure is not None
        assert result.folder_structure.startswith("my-app/")
        assert all(f.language != "text" for f in result.files)

    def test_detection_can_be_disabled(self, multi_file_reply):
        result = parse(multi_file_reply, ParserOptions(detect_folder_structure=False))

        assert result.folder_structure is None
        assert "untitled_1.txt" in result.paths()

    def test_plain_text_block_stays_a_file(self):
        result = parse(f"{FENCE}text\nJust some notes.\nNothing else.\n{FENCE}")

        assert result.folder_structure is None
        assert result.paths() == ["untitled_1.txt"]

    def test_markdown_table_in_text_block_stays_a_file(self):
        table = "| name | score |\n|------|-------|\n| a    | 1     |"
        result = parse(f"Results:\n{FENCE}text\n{table}\n{FENCE}\n")

        assert result.folder_structure is None
        assert result.paths() == ["untitled_1.txt"]
        assert result.files[0].content == table

    def test_markdown_table_in_untagged_block_stays_a_file(self):
        result = parse(f"{FENCE}\n| a | b |\n|---|---|\n{FENCE}")

        assert result.folder_structure is None
        assert len(result.files) == 1

    def test_only_text_or_tree_blocks_are_set_aside(self):
        tree = "app/\n├── main.py\n└── util.py"

        assert parse(f"{FENCE}\n{tree}\n{FENCE}").folder_structure is None
        assert parse(f"{FENCE}tree\n{tree}\n{FENCE}").folder_structure == tree

    def test_looks_like_folder_tree(self):
        assert looks_like_folder_tree("app/\n├── main.py\n└── util.py")
        assert looks_like_folder_tree("app/\n  src/\n    main.py")
        assert not looks_like_folder_tree("hello world\nsecond line")
        assert not looks_like_folder_tree("single.py")
        assert not looks_like_folder_tree("| a | b |\n|---|---|\n| 1 | 2 |")
        assert not looks_like_folder_tree("|-- src/\n    |-- app.py")


class TestMultiFileReply:
    def test_all_conventions_together(self, multi_file_reply):
        result = parse(multi_file_reply)

        assert result.paths() == ["package.json", "src/index.ts", "src/utils/helper.ts", "untitled_1.sh"]
        assert result.get("src/index.ts").content.startswith("import { helper }")
        assert result.get("package.json").content == '{"name": "my-app"}'
        assert result.get("package.json").language == "json"


class TestContract:
    """Properties that hold for every input."""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "   \n\n",
            "no code here",
            "```",
            "```\n```",
            "~~~\n```\n~~~\n```",
            "**a.py**\n```python\n```\n**a.py**\n```python\n```",
            "```:\n```",
            "```ts:../../etc/passwd\nx\n```",
            "#### `\n```\n`\n```",
            "\x00\x01```\n \n```",
        ],
    )
    def test_never_raises_and_paths_are_valid(self, text):
        result = parse(text)

        paths = result.paths()
        assert len(paths) == len(set(paths))
        assert paths == sorted(paths)
        for parsed in result.files:
            assert parsed.path
            assert parsed.language

    def test_empty_input_yields_no_files(self):
        result = parse("")

        assert result.files == ()
        assert result.folder_structure is None

    def test_idempotent(self, multi_file_reply):
        assert parse(multi_file_reply) == parse(multi_file_reply)

    def test_output_sorted_case_sensitively(self):
        text = f"{FENCE}js:b.js\n1\n{FENCE}\n{FENCE}js:B.js\n2\n{FENCE}\n{FENCE}js:a.js\n3\n{FENCE}"

        assert parse(text).paths() == ["B.js", "a.js", "b.js"]

    def test_content_preserved_exactly(self):
        body = "line one  \n\n\tindented\n  trailing\n"
        result = parse(f"{FENCE}ts:a.ts\n{body}\n{FENCE}")

        assert result.files[0].content == body

    def test_parallel_calls_match_sequential(self, multi_file_reply):
        inputs = [multi_file_reply, f"{FENCE}css\na {{}}\n{FENCE}", multi_file_reply.replace("helper", "tool")]
        expected = [parse(text) for text in inputs]
        results: dict[int, list] = {}

        def worker(n: int) -> None:
            results[n] = [parse(inputs[(n + i) % len(inputs)]) for i in range(len(inputs) * 3)]

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        for n, outputs in results.items():
            for i, output in enumerate(outputs):
                assert output == expected[(n + i) % len(inputs)]

    def test_strip_path_comments_disabled(self):
        result = parse(f"{FENCE}ts\n// a.ts\nlet x;\n{FENCE}", ParserOptions(strip_path_comments=False))

        assert result.files == (ParsedFile(path="a.ts", content="// a.ts\nlet x;", language="ts"),)


class TestNextBlockTitles:
    def test_untitled_block_does_not_take_next_heading(self):
        text = (
            f"{FENCE}ts\nfirst\n{FENCE}\n\n"
            f"### `src/second.ts`\n\n"
            f"{FENCE}ts\nsecond\n{FENCE}\n"
        )

        result = parse(text)

        assert result.get("src/second.ts").content == "second"
        assert result.get("untitled_1.ts").content == "first"

    def test_last_block_may_use_trailing_heading(self):
        text = f"{FENCE}ts\nonly\n{FENCE}\n### `src/only.ts`\n"

        assert parse(text).paths() == ["src/only.ts"]
