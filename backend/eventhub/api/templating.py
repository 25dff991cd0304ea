"""
Jinja2 page rendering.
"""

from pathlib import Path
from typing import Optional

from fastapi import Request, status
from fastapi.templating import Jinja2Templates

from eventhub.api.deps import RequestContext
from eventhub.core.config import get_settings

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["app_name"] = get_settings().APP_NAME


def render(
    request: Request,
    template: str,
    context: Optional[RequestContext] = None,
    status_code: int = status.HTTP_200_OK,
    **values,
):
    if context is None:
        context = getattr(request.state, "context", None) or RequestContext()

    return templates.TemplateResponse(
        request,
        template,
        {"current_user": context.user, **values},
        status_code=status_code,
    )
