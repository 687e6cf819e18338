"""
JSON Loader for pptx_templater.

This module loads a fill payload from JSON and validates it against the
Pydantic models defined in core/models.py.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pptx_templater.core.models import TemplateData

logger = logging.getLogger(__name__)


def load_template_data(source: Union[str, Path, Dict[str, Any]],
                       base_dir: Optional[Union[str, Path]] = None) -> TemplateData:
    """
    Load a fill payload.

    Relative picture paths are resolved against the folder of the JSON file,
    or against base_dir when given.

    Args:
        source: Path to a JSON file, string containing JSON, or dictionary
            with the payload.
        base_dir: Folder used to resolve relative picture paths. Defaults to
            the JSON file folder, or the current directory.

    Returns:
        TemplateData: The validated payload.

    Raises:
        FileNotFoundError: If the provided path does not exist
        json.JSONDecodeError: If the JSON is invalid
        ValidationError: If the data does not match the TemplateData model
        TypeError: If the source type is not supported
    """
    if isinstance(source, Path) or (isinstance(source, str) and not source.lstrip().startswith("{")):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"JSON source file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise json.JSONDecodeError(
                    f"Invalid JSON in file {path}: {str(e)}", e.doc, e.pos
                )
        if base_dir is None:
            base_dir = path.parent
    elif isinstance(source, str):
        data = json.loads(source)
    elif isinstance(source, dict):
        data = source
    else:
        raise TypeError(f"Unsupported source type: {type(source)}. Expected str, Path or dict.")

    template_data = TemplateData.model_validate(data)

    base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
    for picture in template_data.iter_pictures():
        if not picture.path.is_absolute():
            picture.path = base_dir / picture.path

    logger.info(f"Loaded fill data for {len(template_data.slides)} slide(s)")
    return template_data
