from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"])
)


def format_rupiah(amount) -> str:
    return "Rp" + f"{int(amount or 0):,}".replace(",", ".")


env.filters["rupiah"] = format_rupiah


def render_template(template_path: str, **context) -> str:
    template = env.get_template(template_path)
    return template.render(**context)
