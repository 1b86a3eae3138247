"""Text rendering of resolved walks from Jinja2 templates."""

from pathlib import Path

import typing
import jinja2

from .config import DEFAULT_TEMPLATE_DIR
from .process import Step
from .walk import Walk


def make_environment(template_dir: Path = DEFAULT_TEMPLATE_DIR) -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(template_dir),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )


_env = make_environment()


def render(
    template_name: str, env: jinja2.Environment | None = None, **kwargs: typing.Any
) -> str:
    return (env or _env).get_template(template_name).render(**kwargs)


def render_walks(
    slots: typing.Sequence[int],
    walks: typing.Sequence[tuple[Step, ...]],
    env: jinja2.Environment | None = None,
) -> str:
    """Render processed walks as numbered step lists."""
    return render("walks.txt.j2", env, slots=list(slots), walks=list(walks))


def render_tokens(
    slots: typing.Sequence[int],
    walks: typing.Sequence[Walk],
    env: jinja2.Environment | None = None,
) -> str:
    """Render raw walks one token per line, without meta processing."""
    return render("tokens.txt.j2", env, slots=list(slots), walks=list(walks))
