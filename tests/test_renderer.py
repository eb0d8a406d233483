import unittest

from rich.cells import cell_len
from rich.text import Text

from senpai.ai.errors import EmptyStructuredOutputError
from senpai.ai.parser import ParsedRecord
from senpai.ai.prompts import TaskKind
from senpai.ai.renderer import LABEL_GUTTER, STYLES, format_reply, render


def visible_lines(display: str):
    """The text of each display line as it appears on screen, without styling."""
    return [Text.from_markup(line).plain for line in display.split("\n")]


class TestRenderRecords(unittest.TestCase):
    """Tests for the aligned label/content layout."""

    def setUp(self):
        self.records = (
            ParsedRecord("rsync", "command to sync files"),
            ParsedRecord("-a", "archive mode"),
            ParsedRecord("/backup", "destination directory"),
        )

    def test_labels_are_padded_to_the_same_column(self):
        width = len("/backup") + LABEL_GUTTER

        for kind in (TaskKind.EXPLAIN, TaskKind.TEACH, TaskKind.DIAGNOSE_ERROR):
            with self.subTest(kind=kind):
                lines = visible_lines(render(self.records, kind).display)

                self.assertEqual(len(lines), len(self.records))
                for line, record in zip(lines, self.records):
                    self.assertEqual(line[:width], record.label.ljust(width))
                    self.assertEqual(line[width:], record.content)

    def test_wide_labels_align_by_terminal_cells(self):
        records = (ParsedRecord("ls", "list"), ParsedRecord("表示", "display"))

        lines = visible_lines(render(records, TaskKind.EXPLAIN).display)

        # "表示" takes four cells, so "ls" is padded to the same column.
        self.assertEqual(lines, ["ls    list", "表示  display"])
        columns = [cell_len(line[: line.index(r.content)]) for line, r in zip(lines, records)]
        self.assertEqual(columns, [4 + LABEL_GUTTER] * 2)

    def test_plain_output_round_trips(self):
        rendered = render(self.records, TaskKind.EXPLAIN)

        recovered = [tuple(line.split(": ", 1)) for line in rendered.plain.split("\n")]

        self.assertEqual(recovered, [(r.label, r.content) for r in self.records])

    def test_plain_output_has_no_styling(self):
        rendered = render(self.records, TaskKind.CONVERT)

        self.assertNotIn("[", rendered.plain)
        self.assertIn("[magenta]", rendered.display)

    def test_markup_in_model_text_is_shown_literally(self):
        records = (ParsedRecord("[bold]", "looks like [red]markup[/red]"),)

        rendered = render(records, TaskKind.EXPLAIN)

        self.assertEqual(
            visible_lines(rendered.display), ["[bold]  looks like [red]markup[/red]"]
        )
        self.assertEqual(rendered.plain, "[bold]: looks like [red]markup[/red]")

    def test_rendering_is_deterministic(self):
        self.assertEqual(render(self.records, TaskKind.FIX), render(self.records, TaskKind.FIX))

    def test_nothing_to_render_is_an_error(self):
        with self.assertRaises(EmptyStructuredOutputError):
            render((), TaskKind.EXPLAIN)


class TestRenderCommands(unittest.TestCase):
    """Tests for the numbered `generate` layout."""

    def test_commands_are_numbered_from_one(self):
        rendered = render(("ls -la", "find . -name '*.js'"), TaskKind.GENERATE)

        self.assertEqual(
            visible_lines(rendered.display), ["1. ls -la", "2. find . -name '*.js'"]
        )
        self.assertEqual(rendered.plain, "ls -la\nfind . -name '*.js'")

    def test_no_commands_is_an_error(self):
        with self.assertRaises(EmptyStructuredOutputError):
            render((), TaskKind.GENERATE)


class TestFormatReply(unittest.TestCase):
    def test_every_task_kind_has_a_style(self):
        self.assertEqual(set(STYLES), set(TaskKind))

    def test_generate_uses_the_list_grammar(self):
        rendered = format_reply("ls -la, pwd", TaskKind.GENERATE)
        self.assertEqual(rendered.plain, "ls -la\npwd")

    def test_other_kinds_use_the_record_grammar(self):
        rendered = format_reply("WHAT ||| shows files\n---\nFLAGS ||| -a, -l", TaskKind.TEACH)
        self.assertEqual(rendered.plain, "WHAT: shows files\nFLAGS: -a, -l")

    def test_unusable_reply_is_an_error(self):
        with self.assertRaises(EmptyStructuredOutputError):
            format_reply("Sure! Here is what ls does: it lists files.", TaskKind.EXPLAIN)
