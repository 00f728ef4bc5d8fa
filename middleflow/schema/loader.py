"""Pipeline document I/O.

JSON is the interchange format; YAML documents with the same shape are
accepted when loading from disk. Every document is shape checked before
any pipeline object is built, and a malformed document is rejected
rather than coerced.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from middleflow.common.exceptions import LoadError, PipelineDocumentError
from middleflow.config import get_config
from middleflow.constants import FILE_EXT_YAML, FILE_EXT_YML, SUPPORTED_EXTENSIONS
from middleflow.pipeline import Pipeline

from .models import PipelineModel

logger = logging.getLogger(__name__)

YAML_EXTENSIONS = (FILE_EXT_YAML, FILE_EXT_YML)


def _yaml() -> YAML:
    yaml = YAML(typ="safe", pure=True)
    yaml.default_flow_style = False
    return yaml


class FileReader:
    """Simple file reading abstraction with format detection."""

    @staticmethod
    def read_file(file_path: str | Path) -> Any:
        """
        Read and parse file content based on extension.

        Returns:
            Parsed document

        Raises:
            LoadError: For I/O or parsing errors
        """
        file_path = Path(file_path)
        suffix = file_path.suffix.lower().lstrip(".")

        if suffix not in SUPPORTED_EXTENSIONS:
            raise LoadError(f"Unsupported file format: {file_path.suffix or '(none)'}", str(file_path))
        if not file_path.exists():
            raise LoadError(f"File not found: {file_path}", str(file_path))

        try:
            with open(file_path, encoding="utf-8") as f:
                if suffix in YAML_EXTENSIONS:
                    try:
                        return _yaml().load(f)
                    except YAMLError as e:
                        raise LoadError(f"Error parsing YAML in {file_path}: {e}", str(file_path)) from e
                try:
                    return json.load(f)
                except json.JSONDecodeError as e:
                    raise LoadError(f"Error parsing JSON in {file_path}: {e}", str(file_path)) from e
        except PermissionError as e:
            raise LoadError(f"Permission denied reading {file_path}", str(file_path)) from e
        except UnicodeDecodeError as e:
            raise LoadError(f"Encoding error reading {file_path}: {e}", str(file_path)) from e


def _format_errors(error: ValidationError) -> list[str]:
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "(document)"
        messages.append(f"{location}: {item['msg']}")
    return messages


def parse_pipeline(data: Any) -> Pipeline:
    """
    Build a pipeline from an already decoded document.

    Raises:
        PipelineDocumentError: If the document does not have the pipeline shape
    """
    if not isinstance(data, dict):
        raise PipelineDocumentError(
            "Pipeline document must be an object",
            context={"received": type(data).__name__},
        )
    try:
        PipelineModel.model_validate(data)
    except ValidationError as e:
        errors = _format_errors(e)
        logger.warning("Rejected pipeline document with %d error(s)", len(errors))
        raise PipelineDocumentError("Invalid pipeline document", errors=errors) from e
    return Pipeline.from_dict(data)


def export_to_json(pipeline: Pipeline, indent: int | None = None) -> str:
    """Serialize a pipeline to its JSON document."""
    if indent is None:
        indent = get_config().json_indent
    return json.dumps(pipeline.to_dict(), indent=indent, ensure_ascii=False)


def import_from_json(text: str) -> Pipeline:
    """
    Parse a JSON pipeline document.

    Raises:
        PipelineDocumentError: On invalid JSON or a document missing the pipeline shape
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Rejected pipeline document: %s", e)
        raise PipelineDocumentError(f"Invalid JSON: {e.msg}", context={"line": e.lineno, "column": e.colno}) from e
    return parse_pipeline(data)


def load_pipeline(file_path: str | Path) -> Pipeline:
    """
    Load a pipeline from a ``.json``, ``.yaml`` or ``.yml`` file.

    Raises:
        LoadError: If the file cannot be read or parsed
        PipelineDocumentError: If the document does not have the pipeline shape
    """
    data = FileReader.read_file(file_path)
    pipeline = parse_pipeline(data)
    logger.debug("Loaded pipeline %s (%d node(s)) from %s", pipeline.id, len(pipeline), file_path)
    return pipeline


def save_pipeline(pipeline: Pipeline, file_path: str | Path) -> Path:
    """
    Write a pipeline document, choosing the format from the extension.

    Raises:
        LoadError: If the extension is unsupported or the file cannot be written
    """
    file_path = Path(file_path)
    suffix = file_path.suffix.lower().lstrip(".")
    if suffix not in SUPPORTED_EXTENSIONS:
        raise LoadError(f"Unsupported file format: {file_path.suffix or '(none)'}", str(file_path))

    try:
        with open(file_path, "w", encoding="utf-8") as f:
            if suffix in YAML_EXTENSIONS:
                _yaml().dump(pipeline.to_dict(), f)
            else:
                f.write(export_to_json(pipeline))
                f.write("\n")
    except OSError as e:
        raise LoadError(f"Cannot write {file_path}: {e}", str(file_path)) from e
    return file_path
