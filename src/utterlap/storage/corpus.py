"""Corpus document loading.

The entity-management collaborator hands over utterances, dialogs and
services as one JSON document, either grouped
(``{"utterances": [...], "dialogs": [...], "services": [...]}``) or as a
flat list whose items carry an ``objectType`` field.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from utterlap.core.exceptions import CorpusError
from utterlap.models.corpus import Corpus, Dialog, Service, Utterance


logger = logging.getLogger(__name__)


class UtteranceModel(BaseModel):
    """Validation model for an utterance record."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    text: str = Field(..., alias="utterance", min_length=1)
    dialog_key: str = Field(..., alias="dialogKey")
    is_question: bool = Field(False, alias="isQuestion")
    is_imperative: bool = Field(False, alias="isImperative")


class DialogModel(BaseModel):
    """Validation model for a dialog record."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    dialog_key: str = Field(..., alias="dialogKey", min_length=1)
    service_key: str = Field("", alias="serviceKey")
    description: str = Field("")


class ServiceModel(BaseModel):
    """Validation model for a service record."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    description: str = Field("")


class CorpusDocumentModel(BaseModel):
    """Validation model for the combined corpus document."""

    model_config = ConfigDict(extra="ignore")

    utterances: list[UtteranceModel] = Field(default_factory=list)
    dialogs: list[DialogModel] = Field(default_factory=list)
    services: list[ServiceModel] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _group_flat_list(cls, data: Any) -> Any:
        if not isinstance(data, list):
            return data
        grouped: dict[str, list[Any]] = {"utterances": [], "dialogs": [], "services": []}
        for item in data:
            object_type = item.get("objectType") if isinstance(item, dict) else None
            if object_type == "utterance":
                grouped["utterances"].append(item)
            elif object_type == "dialog":
                grouped["dialogs"].append(item)
            elif object_type == "service":
                grouped["services"].append(item)
            else:
                logger.warning(f"Skipping corpus item with unknown objectType: {object_type!r}")
        return grouped

    @model_validator(mode="after")
    def _unique_dialog_keys(self) -> "CorpusDocumentModel":
        seen: set[str] = set()
        for dialog in self.dialogs:
            if dialog.dialog_key in seen:
                raise ValueError(f"Duplicate dialog key: {dialog.dialog_key}")
            seen.add(dialog.dialog_key)
        return self

    def to_corpus(self) -> Corpus:
        """Convert the validated document to a corpus snapshot."""
        return Corpus.build(
            utterances=(
                Utterance(u.text, u.dialog_key, u.is_question, u.is_imperative)
                for u in self.utterances
            ),
            dialogs=(Dialog(d.dialog_key, d.service_key, d.description) for d in self.dialogs),
            services=(Service(s.name, s.description) for s in self.services),
        )


def parse_corpus(data: Any) -> Corpus:
    """Validate a decoded corpus document.

    Raises:
        CorpusError: If the document does not validate.
    """
    try:
        document = CorpusDocumentModel.model_validate(data)
    except ValidationError as e:
        raise CorpusError(
            f"Invalid corpus document: {e.error_count()} error(s)",
            details={"errors": "; ".join(err["msg"] for err in e.errors()[:5])},
        ) from e

    corpus = document.to_corpus()

    known = set(corpus.dialog_keys)
    orphans = {u.dialog_key for u in corpus.utterances if u.dialog_key not in known}
    if orphans:
        logger.warning(
            f"{len(orphans)} dialog key(s) used by utterances are not defined: "
            f"{', '.join(sorted(orphans))}"
        )

    return corpus


def load_corpus(path: Path) -> Corpus:
    """Load and validate a corpus document from disk.

    Raises:
        CorpusError: If the file is missing, not JSON, or invalid.
    """
    if not path.exists():
        raise CorpusError("Corpus file not found", path=path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CorpusError(f"Invalid JSON in corpus file: {e}", path=path) from e

    corpus = parse_corpus(data)
    logger.info(
        f"Loaded corpus from {path}: {len(corpus.utterances)} utterances, "
        f"{len(corpus.dialogs)} dialogs, {len(corpus.services)} services"
    )
    return corpus


def save_corpus(corpus: Corpus, path: Path) -> None:
    """Write a corpus snapshot in the grouped document layout."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(corpus.to_dict(), f, indent=2, ensure_ascii=False)
