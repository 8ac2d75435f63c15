"""Plume static site generator.

Plume turns a directory of markdown posts with TOML front matter into a
static HTML site using Jinja2 templates: a landing page, one page per
published post and a post index.

The main entry point is the CLI module, which provides commands for
scaffolding new projects and building sites.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
