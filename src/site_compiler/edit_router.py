from __future__ import annotations

import logging
from typing import Callable, Sequence

from pydantic import ValidationError

from .diff import out_of_scope, revert_paths, structural_diff
from .edit_classifier import ConfigMutator, EditClassifier
from .errors import EditMutationError
from .field_updaters import extract_logo_url, update_logo
from .models.config import UploadedAsset, WebsiteConfig
from .models.edit import EditResult

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


def _notify(on_progress: ProgressCallback | None, message: str) -> None:
    if on_progress is not None:
        on_progress(message)


def _validated(candidate: object) -> WebsiteConfig:
    if isinstance(candidate, WebsiteConfig):
        candidate = candidate.to_ir()
    try:
        return WebsiteConfig.model_validate(candidate)
    except ValidationError as exc:
        raise EditMutationError(f"mutator returned an invalid config: {exc.error_count()} errors") from exc


def smart_edit(
    current_config: WebsiteConfig,
    edit_text: str,
    on_progress: ProgressCallback | None = None,
    uploaded_assets: Sequence[UploadedAsset] | None = None,
    *,
    classifier: EditClassifier,
    mutator: ConfigMutator,
    enforce_scope: bool = False,
) -> EditResult:
    """Route one edit request to regeneration, the logo fast path or a scoped mutation.

    The current config is never modified; a changed config is always a new value.

    Args:
        current_config: IR snapshot the edit applies to
        edit_text: The user's request
        on_progress: Receives a short status line at each stage
        uploaded_assets: Images attached to the request
        classifier: Decides the edit category and its target fields
        mutator: Applies non-regenerating edits
        enforce_scope: Revert changes outside the target fields instead of only logging them

    Returns:
        Either a new config, or the current config with should_regenerate set

    Raises:
        EditMutationError: The mutator returned something that is not a valid config
    """
    _notify(on_progress, "Analyzing edit request...")
    classification = classifier.classify_edit(edit_text, current_config)

    if classification.requires_regeneration:
        _notify(on_progress, "Major changes detected, regenerating from scratch...")
        logger.info(
            "Edit routed to regeneration",
            extra={"edit_type": classification.type, "reasoning": classification.reasoning},
        )
        return EditResult(config=current_config, should_regenerate=True, classification=classification)

    if classification.type == "logo-only":
        _notify(on_progress, "Updating logo...")
        logo_url = extract_logo_url(edit_text, uploaded_assets)
        if logo_url:
            updated = update_logo(current_config, logo_url)
            logger.info("Applied logo fast path", extra={"logo_url": logo_url})
            return EditResult(
                config=updated,
                should_regenerate=False,
                classification=classification,
                changed_paths=structural_diff(current_config.to_ir(), updated.to_ir()),
                fast_path=True,
            )
        logger.info("No logo URL found in edit; falling back to mutator")

    _notify(on_progress, "Applying surgical changes...")
    mutated = _validated(mutator.mutate_config(current_config, edit_text, classification))

    old_ir = current_config.to_ir()
    new_ir = mutated.to_ir()
    changed = structural_diff(old_ir, new_ir)
    targets = list(classification.target_fields)
    stray = out_of_scope(changed, targets) if targets else []

    if stray:
        logger.warning(
            "Mutator changed fields outside the edit's targets",
            extra={"target_fields": targets, "out_of_scope": stray, "enforced": enforce_scope},
        )
        if enforce_scope:
            mutated = _validated(revert_paths(old_ir, new_ir, stray))
            changed = [path for path in changed if path not in stray]

    logger.info(
        "Applied scoped edit",
        extra={"edit_type": classification.type, "changed_paths": changed},
    )
    return EditResult(
        config=mutated,
        should_regenerate=False,
        classification=classification,
        changed_paths=changed,
        out_of_scope_paths=stray,
    )


__all__ = ["ProgressCallback", "smart_edit"]
