"""Derive draft validators that accept partially filled entries."""

import logging

from pydantic import BaseModel, Field, create_model

logger = logging.getLogger(__name__)


def to_draft(model: type[BaseModel]) -> type[BaseModel]:
    """
    Relax a compiled entry validator so every top-level field is optional.

    Only the top level is relaxed: groups and blocks keep the requiredness they
    were compiled with. Relaxed fields may be omitted but not set to null unless
    they were already optional.

    Args:
        model: Entry validator returned by compile_content_type.

    Returns:
        type[BaseModel]: Subclass of the model with all top-level fields optional.
    """
    overrides = {
        name: (
            info.rebuild_annotation(),
            Field(None, alias=info.alias, description=info.description),
        )
        for name, info in model.model_fields.items()
    }
    logger.debug(f"Relaxed {len(overrides)} fields of {model.__name__} for drafts")
    return create_model(f"{model.__name__}Draft", __base__=model, **overrides)
