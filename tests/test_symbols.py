import pytest

from manify.config import ManifyConfig
from manify.exceptions import ContractError
from manify.symbols import build_symbol_record, extract_symbol_name, format_synopsis


@pytest.mark.parametrize(
    ("synopsis", "expected"),
    [
        ("extern bstring bfromcstr (const char * str);\n", "bfromcstr"),
        ("extern int biseqcstrcaseless(const_bstring b, const char * s);\n", "biseqcstrcaseless"),
        ("#define blength(b)\n", "blength"),
        ("extern int bstrListDestroy (struct bstrList * sl);\n", "bstrListDestroy"),
        ("    extern int utf8ScanBackwardsForCodePoint (unsigned char* msg);\n", "utf8ScanBackwardsForCodePoint"),
    ],
)
def test_extract_symbol_name(synopsis, expected):
    assert extract_symbol_name(synopsis) == expected


def test_extract_symbol_name_fails_without_declaration():
    with pytest.raises(ContractError):
        extract_symbol_name("extern int counter;\n")


def test_build_symbol_record_upper_cases_title():
    record = build_symbol_record("extern bstring bfromcstr (const char * str);\n")

    assert record.name == "bfromcstr"
    assert record.title == "BFROMCSTR"
    assert record.synopsis == "extern bstring bfromcstr (const char * str);\n"


def test_format_synopsis_drops_extern():
    assert format_synopsis("extern int bdestroy (bstring b);\n") == "int bdestroy (bstring b);\n"


def test_format_synopsis_realigns_wrapped_declaration():
    synopsis = "    extern int bassignblk (bstring a, const void * s,\n" + " " * 27 + "int len);\n"

    assert format_synopsis(synopsis) == (
        "int bassignblk (bstring a, const void * s,\n" + " " * 16 + "int len);\n"
    )


def test_format_synopsis_without_extern_is_dedented_and_escaped():
    synopsis = "  #define bdata(b) ((b)->data)\n  '\\0' ends it\n"

    assert format_synopsis(synopsis, ManifyConfig()) == (
        "#define bdata(b) ((b)->data)\n\\'\\\\0' ends it\n"
    )
