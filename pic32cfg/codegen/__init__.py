"""C source and text renderers for compiled configuration."""

from pic32cfg.codegen.pps import render_pps_initialize
from pic32cfg.codegen.registers import (
    render_config_words_header,
    render_register_summary,
    render_xc32_pragmas,
)

__all__ = [
    "render_pps_initialize",
    "render_register_summary",
    "render_config_words_header",
    "render_xc32_pragmas",
]
