from fastapi import Request

from yeartrace.services.plugin import YeartracePlugin


def get_plugin(request: Request) -> YeartracePlugin:
    """The plugin instance built by the application lifespan."""
    return request.app.state.plugin
