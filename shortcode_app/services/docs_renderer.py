from pathlib import Path
from typing import Any, Dict

import markdown
from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates


class DocsRenderer:
    """
    Renders the documentation page served for unmatched requests.

    ``api.md`` and ``header.md`` are Jinja2 templates producing Markdown;
    the HTML of both is placed into ``index.html``.
    """

    INDEX_TEMPLATE = "index.html"

    def __init__(self, templates_dir: Path, app_vars: Dict[str, Any]):
        self.templates_dir = Path(templates_dir)
        self.app_vars = app_vars
        self.templates = Jinja2Templates(directory=str(self.templates_dir))

    @property
    def index_path(self) -> Path:
        return self.templates_dir / self.INDEX_TEMPLATE

    def render_markdown(self, name: str) -> str:
        source = self.templates.get_template(name).render(appVars=self.app_vars)
        return markdown.markdown(source, extensions=["fenced_code", "tables"])

    def render(self, request: Request) -> HTMLResponse:
        return self.templates.TemplateResponse(
            request,
            self.INDEX_TEMPLATE,
            {
                "appVars": self.app_vars,
                "bodyContent": self.render_markdown("api.md"),
                "headerContent": self.render_markdown("header.md"),
            },
        )
