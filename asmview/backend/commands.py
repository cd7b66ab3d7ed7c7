"""radare2 command scripts issued by the session and discovery pipeline.

Every request runs in a fresh backend process, so scripts that read
analysis results carry the analysis command they depend on.
"""

from __future__ import annotations

from .channel import CommandScript

RELOCATION_SETTINGS = ("e bin.relocs.apply=true", "e bin.cache=true")
CACHED_IO_SETTINGS = (*RELOCATION_SETTINGS, "e io.cache=true")
ANALYSIS_SETTINGS = (
    *CACHED_IO_SETTINGS,
    "e anal.autoname=true",
    "e anal.hasnext=true",
    "e anal.jmp.tbl=true",
    "e anal.pushret=true",
)
LISTING_SETTINGS = (
    *CACHED_IO_SETTINGS,
    "e scr.color=false",
    "e asm.bytes=true",
    "e asm.lines=false",
    "e asm.flags=true",
    "e asm.xrefs=true",
    "e asm.comments=true",
    "e asm.offset=true",
)

RAW_DISASSEMBLY_COUNT = 1000
ENTRY_DISASSEMBLY_COUNT = 64
SYMBOL_CONTEXT_COUNT = 10
CANNOT_FIND_FUNCTION = "Cannot find function"

DEEP_ANALYSIS = CommandScript(
    "deep_analysis",
    (
        *ANALYSIS_SETTINGS,
        "aei",
        "aeim",
        "aeip",
        "aaaa",
        "aac",
        "aar",
        "aap",
        "aan",
        "aas",
        "/a call",
        "/a jmp",
        "af @@ sym.*",
        "af @@ fcn.*",
        "af @@ entry*",
    ),
)
ENTRY_POINT = CommandScript("entry_point", (*RELOCATION_SETTINGS, "ie"))
DIAGNOSTIC_INFO = CommandScript(
    "diagnostic_info",
    (*CACHED_IO_SETTINGS, "i", "ie", "iE", "is", "ii", "iS", "afl", "aa", "afl"),
)
FUNCTION_LIST_JSON = CommandScript(
    "function_list_json",
    (*ANALYSIS_SETTINGS, "e scr.color=false", "aaaa", "aflj"),
)
FUNCTION_LIST_TEXT = CommandScript("function_list_text", (*ANALYSIS_SETTINGS, "aaa", "afl"))
SYMBOLS_JSON = CommandScript("symbols_json", (*RELOCATION_SETTINGS, "isj"))
PROLOGUE_SCAN = CommandScript(
    "prologue_scan",
    (
        *RELOCATION_SETTINGS,
        "/c push ebp",
        "/c push rbp",
        "/c sub esp",
        "/c sub rsp",
        "aa",
        "af @@ fcn.*",
        "af @@ sym.*",
        "afl",
    ),
)
RAW_DISASSEMBLY = CommandScript(
    "raw_disassembly",
    (*CACHED_IO_SETTINGS, "s 0x0", f"pd {RAW_DISASSEMBLY_COUNT}"),
)
IMPORTS = CommandScript("imports", (*RELOCATION_SETTINGS, "ii"))
EXPORTS = CommandScript("exports", (*RELOCATION_SETTINGS, "iE"))
STRINGS = CommandScript("strings", (*CACHED_IO_SETTINGS, "iz"))
SECTIONS = CommandScript("sections", (*CACHED_IO_SETTINGS, "iS"))


def name_entry(address: str) -> CommandScript:
    return CommandScript("name_entry", (*CACHED_IO_SETTINGS, f"s {address}", "af", "afn entry"))


def entry_disassembly(address: str) -> CommandScript:
    return CommandScript(
        "entry_disassembly",
        (*LISTING_SETTINGS, f"s {address}", f"pd {ENTRY_DISASSEMBLY_COUNT}"),
    )


def cross_references(address: str) -> CommandScript:
    return CommandScript("cross_references", (*CACHED_IO_SETTINGS, f"s {address}", "axt"))


def section_disassembly(vaddr: str, size: int) -> CommandScript:
    # ``pd`` counts instructions, so a byte size over-covers the section.
    return CommandScript(
        "section_disassembly",
        (*LISTING_SETTINGS, "e anal.hasnext=true", f"s {vaddr}", f"pd {size}"),
    )


def function_disassembly(address: str) -> CommandScript:
    return CommandScript(
        "function_disassembly",
        (
            *LISTING_SETTINGS,
            "e asm.functions=false",
            "e asm.section=false",
            f"s {address}",
            "af",
            "pdf",
        ),
    )


def function_disassembly_retry(address: str) -> CommandScript:
    return CommandScript(
        "function_disassembly_retry",
        (*LISTING_SETTINGS, f"s {address}", "aa", "af", "pdf"),
    )


def symbol_context(address: str) -> CommandScript:
    return CommandScript(
        "symbol_context",
        (*LISTING_SETTINGS, f"s {address}", f"pd {SYMBOL_CONTEXT_COUNT}"),
    )
