"""Tessera - layered template resolution for static sites.

Picks the template that renders a logical name from the site's own
templates, an optional theme and a set of built-ins, and renders it with
Jinja2. Theme templates are namespaced under ``<theme>/templates/`` so they
can coexist with same-named site templates.
"""

__version__ = "0.1.0"
__author__ = "Tessera Contributors"
