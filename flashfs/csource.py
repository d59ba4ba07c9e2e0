import jinja2

BYTES_PER_LINE = 16

TEMPLATE = """\
// Generated by mkflashfs from {{ root }}. Do not edit.
#include <stddef.h>

const unsigned char {{ symbol }}[{{ size }}] __attribute__((aligned(4))) = {
{%- for line in lines %}
    {{ line }}
{%- endfor %}
};

const size_t {{ symbol }}_len = {{ size }};
"""


def hex_lines(data):
    for i in range(0, len(data), BYTES_PER_LINE):
        yield " ".join(f"0x{b:02x}," for b in data[i:i + BYTES_PER_LINE])


def render_c_source(data, symbol, root=""):
    """Renders a C source file embedding `data` as a byte array."""
    return jinja2.Template(TEMPLATE).render(
        root=root,
        symbol=symbol,
        size=len(data),
        lines=hex_lines(data),
    ) + "\n"


def write_c_source(image_path, c_source_path, symbol, root=""):
    with open(image_path, "rb") as f:
        data = f.read()
    with open(c_source_path, "w") as f:
        f.write(render_c_source(data, symbol, root))
