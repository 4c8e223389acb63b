from __future__ import annotations

import io
from pathlib import Path

import pytest

from manify.config import ManifyConfig
from manify.exceptions import CapacityError, ContractError
from manify.filesystem import OutputRouter
from manify.models import ScanMode
from manify.scanner import ConvertFileError, Scanner, convert_document, convert_file

REFERENCE = (
    "The functions\n"
    "-------------\n"
    "\n"
    "extern bstring bfromcstr (const char * str);\n"
    "\n"
    "Take a char * and make a bstring.\n"
    "\n"
    "For example:\n"
    "\n"
    '    bstring b = bfromcstr ("Hello");\n'
    "\n"
    "==========\n"
)

TWO_FUNCTIONS = (
    "The functions\n"
    "-------------\n"
    "\n"
    "extern int bdestroy (bstring b);\n"
    "\n"
    "Deallocate the bstring.\n"
    "\n"
    "    ..........\n"
    "\n"
    "extern int blength (const_bstring b);\n"
    "\n"
    "Return the length.\n"
    "\n"
    "==========\n"
)


def _convert(content: str, tmp_path: Path, **settings):
    main = io.StringIO()
    result = convert_document(content, main, ManifyConfig(**settings), man_dir=tmp_path / "man3")
    return main.getvalue(), result


class RecordingRouter(OutputRouter):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.events: list[str] = []

    def open_symbol(self, name):
        self.events.append(f"open {name}")
        return super().open_symbol(name)

    def close_symbol(self):
        self.events.append("close")
        super().close_symbol()


def test_overview_title(tmp_path):
    output, _ = _convert("Better String library\n" + "-" * 21 + "\n\n", tmp_path)

    assert output == (
        ".TH BSTRLIB 3\n"
        ".SH NAME\nbstrlib \\- the better string library\n"
        ".SH BETTER STRING LIBRARY\n"
    )


def test_heading_and_paragraph(tmp_path):
    output, result = _convert("Functions\n---------\n\nSome prose\nover two lines.\n", tmp_path)

    assert output == ".SH FUNCTIONS\n.P\nSome prose\nover two lines.\n"
    assert result.echoed == 0
    assert result.final_mode is ScanMode.DEFAULT


def test_ordered_item_with_indented_continuation(tmp_path):
    # Continuation lines are flushed left like the first line; the indent is
    # what marks the item as tagged, not part of its body.
    output, _ = _convert("1. Do the thing\n   continued here\n\n", tmp_path)

    assert output == ".TP\n1.\nDo the thing\ncontinued here\n"


def test_ordered_item_with_flush_continuation_is_a_paragraph(tmp_path):
    output, _ = _convert("1. Do the thing\nNo indent line\n\n", tmp_path)

    assert output == ".P\n1. Do the thing\nNo indent line\n"


def test_consecutive_ordered_items(tmp_path):
    output, _ = _convert("1. First\n2. Second\n\n", tmp_path)

    assert output == ".TP\n1.\nFirst\n.TP\n2.\nSecond\n"


def test_unordered_items(tmp_path):
    output, _ = _convert("- Simple API\n- Fast\n\n", tmp_path)

    assert output == ".TP\n-\nSimple API\n.TP\n-\nFast\n"


def test_list_open_at_end_of_input_is_flushed(tmp_path):
    output, result = _convert("- Fast\n", tmp_path)

    assert output == ".TP\n-\nFast\n"
    assert result.final_mode is ScanMode.DEFAULT


def test_block_quote_then_paragraph(tmp_path):
    output, _ = _convert("    x = 1;\n    y = 2;\n\nNext para.\n", tmp_path)

    assert output == "\n.EX\n    x = 1;\n    y = 2;\n.EE\n.P\nNext para.\n"


def test_block_quote_keeps_inner_blank_lines(tmp_path):
    output, _ = _convert("    a\n\n    b\n\nEnd.\n", tmp_path)

    assert output == "\n.EX\n    a\n\n    b\n.EE\n.P\nEnd.\n"


def test_block_quote_is_reindented(tmp_path):
    output, _ = _convert("        deep\n          deeper\n", tmp_path)

    assert output == "\n.EX\n    deep\n      deeper\n.EE\n"


def test_macro_description(tmp_path):
    output, _ = _convert("BSTRLIB_NOVSNP\n\nDefining this macro disables vsnprintf.\n\n", tmp_path)

    assert output == ".TP\nBSTRLIB_NOVSNP\nDefining this macro disables vsnprintf.\n\n"


def test_files_list(tmp_path):
    content = "bstrlib.c    - C implementation.\nbstrlib.h    - C header.\n"
    output, _ = _convert(content, tmp_path)

    assert output == f"\n.nf\n{content}.fi\n"


def test_table(tmp_path):
    table = (
        "Name         Purpose\n"
        "----------   ---------\n"
        "bstring      string type\n"
        "bstrList     list type\n"
    )
    output, _ = _convert(table + "\nAfter table.\n", tmp_path)

    assert output == f"\n.nf\n{table}\n.fi\n.P\nAfter table.\n"


def test_makefile_example(tmp_path):
    example = (
        "BSTRDIR = ../cbstring\n"
        "INCLUDES = -I$(BSTRDIR)\n"
        "\n"
        "bstrlib.o: bstrlib.c bstrlib.h\n"
        "\t$(CC) -c bstrlib.c\n"
        "\t@echo done\n"
        "\n"
    )
    output, _ = _convert(example + "Done.\n", tmp_path)

    assert output == f"\n.nf\n{example}.fi\n.P\nDone.\n"


def test_acknowledgements(tmp_path):
    output, _ = _convert("Bjorn Augestad\nClint Olsen\n", tmp_path)

    assert output == "\n.nf\nBjorn Augestad\nClint Olsen\n.fi\n"


def test_unmatched_text_is_copied_through(tmp_path):
    output, result = _convert("-----\n", tmp_path)

    assert output == "-----"
    assert result.echoed == 5


def test_function_page(tmp_path):
    output, result = _convert(REFERENCE, tmp_path)

    page = tmp_path / "man3" / "bfromcstr.3"
    assert output == ""
    assert result.symbols == ["bfromcstr"]
    assert result.pages == [page]
    assert page.read_text(encoding="utf-8") == (
        ".TH BFROMCSTR 3\n"
        ".SH NAME\nbfromcstr \\- bstrlib function\n"
        ".SH SYNOPSIS\n.EX\nbstring bfromcstr (const char * str);\n\n.EE\n"
        ".SH DESCRIPTION\n"
        ".P\nTake a char * and make a bstring.\n"
        ".P\nFor example:\n\n"
        '.br\n.EX\n    bstring b = bfromcstr ("Hello");\n.EE\n'
    )


def test_function_pages_never_overlap(tmp_path):
    router = RecordingRouter(io.StringIO(), tmp_path / "man3")

    result = Scanner(TWO_FUNCTIONS, router).run()

    assert router.events == ["open bdestroy", "close", "open blength", "close"]
    assert result.symbols == ["bdestroy", "blength"]
    assert (tmp_path / "man3" / "bdestroy.3").read_text(encoding="utf-8").endswith(
        ".P\nDeallocate the bstring.\n"
    )
    assert (tmp_path / "man3" / "blength.3").read_text(encoding="utf-8").endswith(
        ".P\nReturn the length.\n"
    )


def test_page_open_at_end_of_input_is_closed(tmp_path):
    content = "The functions\n-------------\n\nextern int bdestroy (bstring b);\n\nGone.\n"
    router = RecordingRouter(io.StringIO(), tmp_path / "man3")

    result = Scanner(content, router).run()

    assert router.events == ["open bdestroy", "close"]
    assert not router.symbol_open
    assert result.final_mode is ScanMode.FUNCTION_BODY
    assert (tmp_path / "man3" / "bdestroy.3").read_text(encoding="utf-8").endswith(".P\nGone.\n")


def test_section_and_summary_come_from_config(tmp_path):
    _, result = _convert(REFERENCE, tmp_path, section=7, symbol_description="bstraux function")

    page = tmp_path / "man3" / "bfromcstr.7"
    assert result.pages == [page]
    assert page.read_text(encoding="utf-8").startswith(
        ".TH BFROMCSTR 7\n.SH NAME\nbfromcstr \\- bstraux function\n"
    )


def test_unicode_section(tmp_path):
    content = (
        "Unicode functions\n"
        "-----------------\n"
        "\n"
        "These work on UTF-8.\n"
        "  Indented line.\n"
        "\n"
        "    ........\n"
        "\n"
        "extern int bfoo (bstring b);\n"
        "\n"
        "Does foo.\n"
        "\n"
        "==========\n"
    )

    output, result = _convert(content, tmp_path)

    assert output == ".SH UNICODE FUNCTIONS\n.P\nThese work on UTF-8.\nIndented line.\n\n"
    assert result.echoed == 1
    assert result.symbols == ["bfoo"]


def test_macros_intro_starts_reference_section(tmp_path):
    _, result = _convert("The macros\n\nThese are the macros.\n\n\n", tmp_path)

    assert result.final_mode is ScanMode.FUNCTION_HEADING


def test_capacity_error_stops_before_output(tmp_path):
    main = io.StringIO()

    with pytest.raises(CapacityError) as excinfo:
        convert_document(
            "    " + "x" * 30 + "\n\nEnd.\n",
            main,
            ManifyConfig(buffer_capacity=20),
            man_dir=tmp_path,
        )

    assert excinfo.value.line_number == 1
    assert str(excinfo.value).startswith("line 1: buffer capacity of 20")
    assert main.getvalue() == ""


def test_errors_report_the_input_line(tmp_path):
    main = io.StringIO()

    with pytest.raises(CapacityError) as excinfo:
        convert_document(
            "Intro.\n\n" + "    " + "x" * 30 + "\n",
            main,
            ManifyConfig(buffer_capacity=20),
            man_dir=tmp_path,
        )

    assert excinfo.value.line_number == 3
    assert main.getvalue() == ".P\nIntro.\n"


def test_handler_consuming_nothing_in_same_mode_is_a_contract_error(tmp_path):
    class StuckScanner(Scanner):
        def _on_paragraph(self, text):
            return 0

    router = OutputRouter(io.StringIO(), tmp_path)

    with pytest.raises(ContractError) as excinfo:
        StuckScanner("Hello.\n", router).run()

    assert excinfo.value.line_number == 1


def test_convert_file_reads_manual(tmp_path):
    manual = tmp_path / "bstrlib.txt"
    manual.write_text(REFERENCE, encoding="utf-8")
    main = io.StringIO()

    result = convert_file(manual, main, man_dir=tmp_path / "pages")

    assert result.pages == [tmp_path / "pages" / "bfromcstr.3"]


def test_convert_file_missing_file(tmp_path):
    with pytest.raises(ConvertFileError, match="Error accessing"):
        convert_file(tmp_path / "missing.txt", io.StringIO())


def test_convert_file_rejects_invalid_utf8(tmp_path):
    manual = tmp_path / "bstrlib.txt"
    manual.write_bytes(b"Caf\xe9\n")

    with pytest.raises(ConvertFileError, match="Invalid UTF-8"):
        convert_file(manual, io.StringIO(), man_dir=tmp_path)


def test_convert_file_wraps_conversion_errors(tmp_path):
    manual = tmp_path / "bstrlib.txt"
    manual.write_text("    " + "x" * 30 + "\n", encoding="utf-8")

    with pytest.raises(ConvertFileError, match="line 1: buffer capacity"):
        convert_file(manual, io.StringIO(), ManifyConfig(buffer_capacity=20), man_dir=tmp_path)


def test_convert_file_rejects_invalid_config(tmp_path):
    manual = tmp_path / "bstrlib.txt"
    manual.write_text("Text.\n", encoding="utf-8")

    with pytest.raises(ConvertFileError, match="section"):
        convert_file(manual, io.StringIO(), ManifyConfig(section=0), man_dir=tmp_path)


def test_function_description_never_starts_a_line_with_a_request(tmp_path):
    content = (
        "The functions\n-------------\n\n"
        "extern int bfoo (bstring b);\n\n"
        "Returns the length of\n  .5 or 'n' things.\n\n"
        "==========\n"
    )

    _convert(content, tmp_path)

    page = (tmp_path / "man3" / "bfoo.3").read_text(encoding="utf-8")
    assert page.endswith(".P\nReturns the length of\n\\.5 or 'n' things.\n")
