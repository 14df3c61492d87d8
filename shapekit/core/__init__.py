# Core module exports
from shapekit.core.config import Settings, get_settings
from shapekit.core.logging import (
    configure_logging,
    configure_from_settings,
    get_logger,
    bind_context,
    clear_context,
    engine_logger,
    ast_logger,
    provider_logger,
)
