# smartspend/views.py
# Site-wide error pages.

import logging

from django.shortcuts import render

logger = logging.getLogger(__name__)


def page_not_found_view(request, exception):
    """404 page with a link back to the dashboard (or the login page when signed out)."""
    logger.info("Page not found: %s", request.path)
    return render(request, "404.html", {"missing_path": request.path}, status=404)
