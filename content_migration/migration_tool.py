"""
High-level orchestration of a content store hierarchy extraction.

This module defines a :class:`ContentStoreMigrationTool` class that ties
together the loaders, the reconciliation pipeline and the report utilities.
It reads an already-downloaded ``jcr:content`` document plus one or more
component model documents, reconciles them into a sectioned hierarchy and
writes the result as JSON for the document generation step.

Configuration is supplied via a JSON file path or directly as a dictionary.
The ``migration`` section holds the content path and input/output locations;
the ``logging`` section controls verbosity and the log file.
"""

from __future__ import annotations

import glob
import json
import logging
import os
from typing import Any, Dict, List, Optional, Sequence, Tuple

from content_migration.extractors.tabs_models import combine_tabs_models, find_tabs_paths, top_level_tabs_paths
from content_migration.extractors.tree_loader import load_json_document, repository_tree_from_document
from content_migration.hierarchy.pipeline import reconcile
from content_migration.models.hierarchy import HierarchyDocument
from content_migration.utils.errors import InputTreeError, report_error, report_ok
from content_migration.utils.logging import configure_logging

MODEL_SUFFIX = ".model.json"
CONTENT_PATTERN = "*jcr-content*.json"


def tabs_path_from_file_name(file_path: str) -> Optional[str]:
    """``jcr:content.root.container.tabs.model.json`` -> ``/jcr:content/root/container/tabs``."""
    name = os.path.basename(file_path)
    if not name.endswith(MODEL_SUFFIX):
        return None
    stem = name[: -len(MODEL_SUFFIX)]
    if "." not in stem:
        return None
    return "/" + stem.replace(".", "/")


class ContentStoreMigrationTool:
    """
    Encapsulates configuration and the steps needed to turn a content store's
    source documents into a hierarchy file.  Success and failure of each run
    are recorded using the :mod:`content_migration.utils.errors` module.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, *, config_file: Optional[str] = None) -> None:
        if config_file and os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        elif config is None:
            config = {}

        # Ensure essential keys exist to prevent KeyErrors
        config.setdefault("migration", {})
        config["migration"].setdefault("content_path", os.getenv("CONTENT_PATH", ""))
        config["migration"].setdefault("input_dir", "data/")
        config["migration"].setdefault("output_file", "reports/migration/hierarchy.json")
        config["migration"].setdefault("prefix_image_ids", True)
        config["migration"].setdefault("strip_text_hosts", True)

        config.setdefault("logging", {})
        config["logging"].setdefault("verbose", False)
        config["logging"].setdefault("log_file", "reports/migration/migration.log")

        self.config = config
        self.logger = configure_logging(
            verbose=bool(config["logging"]["verbose"]),
            log_file=config["logging"]["log_file"] or None,
        )

    @property
    def store(self) -> str:
        return self.config["migration"]["content_path"] or "unknown-store"

    def log_message(self, message: str, level: str = "INFO") -> None:
        self.logger.log(getattr(logging, level.upper(), logging.INFO), message)

    def load_trees(
        self, content_file: str, model_files: Sequence[str]
    ) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
        """
        Load the repository document and the component model.

        :param content_file: Path of the ``jcr:content`` JSON document.
        :param model_files: One model document, or tabs models to be combined.
            Tabs models named after their tabs path are always combined, even
            a single one, so their panels carry the repository section they
            belong to; they are ordered as the tabs appear on the page.
        :return: ``(content_doc, model_doc)``; ``model_doc`` is ``None`` when
            no model file is given and the hierarchy is read from the
            repository alone.
        :raises InputTreeError: If any file is missing or not a JSON object.
        """
        content_doc = load_json_document(content_file)
        if not model_files:
            self.log_message("No component model given, reading tabs from the repository document")
            return content_doc, None
        models = [(tabs_path_from_file_name(path), load_json_document(path)) for path in model_files]
        if len(models) == 1 and models[0][0] is None:
            return content_doc, models[0][1]

        tree = repository_tree_from_document(content_doc)
        order = top_level_tabs_paths(find_tabs_paths(tree))
        ranked = sorted(models, key=lambda m: order.index(m[0]) if m[0] in order else len(order))
        self.log_message(f"Combining {len(ranked)} tabs models", level="DEBUG")
        return content_doc, combine_tabs_models([(path or "", doc) for path, doc in ranked], tree)

    def extract_hierarchy(self, content_file: str, model_files: Sequence[str]) -> HierarchyDocument:
        content_doc, model_doc = self.load_trees(content_file, model_files)
        options = self.config["migration"]
        document = reconcile(
            content_doc,
            model_doc,
            content_path=options["content_path"],
            prefix_image_ids=bool(options["prefix_image_ids"]),
            strip_text_hosts=bool(options["strip_text_hosts"]),
        )
        if not document.sections:
            report_error("EMPTY_HIERARCHY", self.store)
        return document

    def write_hierarchy(self, document: HierarchyDocument, out_path: Optional[str] = None) -> str:
        out_path = out_path or self.config["migration"]["output_file"]
        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
        with open(out_path, "w", encoding="utf-8") as f:
            json.dump(document.to_dict(), f, ensure_ascii=False, indent=2)
        report_ok(
            "HIERARCHY_WRITTEN",
            self.store,
            {"output": out_path, "sections": len(document.sections)},
        )
        return out_path

    def discover_inputs(self) -> Tuple[Optional[str], List[str]]:
        input_dir = self.config["migration"]["input_dir"]
        content_files = sorted(
            p for p in glob.glob(os.path.join(input_dir, CONTENT_PATTERN)) if not p.endswith(MODEL_SUFFIX)
        )
        model_files = sorted(glob.glob(os.path.join(input_dir, f"*{MODEL_SUFFIX}")))
        self.log_message(f"Discovered content files: {content_files}", level="DEBUG")
        self.log_message(f"Discovered model files: {model_files}", level="DEBUG")
        return (content_files[0] if content_files else None), model_files

    def run(self) -> Optional[HierarchyDocument]:
        """Discover inputs, extract the hierarchy and write it.

        Returns the document, or ``None`` when the inputs are missing or
        malformed (the failure is reported, not raised).
        """
        content_file, model_files = self.discover_inputs()
        if not content_file:
            self.log_message(
                f"No content document found in '{self.config['migration']['input_dir']}'.",
                level="ERROR",
            )
            report_error("INPUT_MISSING", self.store)
            return None
        try:
            document = self.extract_hierarchy(content_file, model_files)
        except InputTreeError as e:
            code = "INPUT_MISSING" if e.reason == "file not found" else "INPUT_MALFORMED"
            report_error(code, self.store, e)
            return None
        self.write_hierarchy(document)
        return document
