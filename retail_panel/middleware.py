"""Middleware for per-operator panel context."""
import inspect
from functools import wraps
from flask import session, g, current_app, jsonify


def load_panel_session():
    """
    Load the operator's existing PanelSession into g (Flask's per-request global).

    Called before each request. The token lives in the signed session
    cookie; the state itself stays in the in-memory registry. Nothing is
    created here: requests that never reach a panel view (metrics scrapes,
    unknown routes) leave the registry untouched.
    """
    g.panel = None

    try:
        registry = current_app.extensions['panel_sessions']
        g.panel = registry.get(session.get('panel_token'))
    except Exception as e:
        # Avoid crashing the whole app if context loading fails
        current_app.logger.error(f"Error in load_panel_session: {e}")


def ensure_panel_session():
    """Return g.panel, creating a session (and its cookie token) on first use."""
    if g.get('panel') is not None:
        return g.panel

    try:
        panel = current_app.extensions['panel_sessions'].create()
    except Exception as e:
        current_app.logger.error(f"Error creating panel session: {e}")
        return None

    session['panel_token'] = panel.token
    session.modified = True
    g.panel = panel
    return panel


def require_panel(f):
    """
    Decorator: Require a panel session, creating one if the operator has none.

    Returns a JSON 503 if no session could be set up.
    Works for both sync and async views.
    """
    def unavailable():
        return jsonify({'status': 'error', 'message': 'Panel session unavailable'}), 503

    if inspect.iscoroutinefunction(f):
        @wraps(f)
        async def decorated_coroutine(*args, **kwargs):
            if ensure_panel_session() is None:
                return unavailable()
            return await f(*args, **kwargs)
        return decorated_coroutine

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if ensure_panel_session() is None:
            return unavailable()
        return f(*args, **kwargs)
    return decorated_function
