"""
Template detection and validation.
"""
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List
from rapidfuzz import fuzz
import logging

logger = logging.getLogger(__name__)


DEFAULT_TEMPLATE_ID = "nbe_v1"


class TemplateDetector:
    """Detects which layout template matches a statement text."""

    def __init__(self, templates_dir: Path = None):
        self.templates_dir = templates_dir or Path(__file__).parent.parent / "templates"
        self.templates = {}
        self._load_templates()

    def _load_templates(self):
        """Load all available templates."""
        if not self.templates_dir.exists():
            logger.warning(f"Templates directory not found: {self.templates_dir}")
            return

        for yaml_file in sorted(self.templates_dir.glob("*.yaml")):
            with open(yaml_file, 'r', encoding='utf-8') as f:
                template_data = yaml.safe_load(f) or {}
            template_id = template_data.get('template_id')
            if template_id:
                self.templates[template_id] = template_data
                logger.debug(f"Loaded template: {template_id}")
            else:
                logger.warning(f"Template without template_id ignored: {yaml_file}")

    def detect_template(self, raw_text: str) -> Optional[str]:
        """
        Detect which template matches the statement text.

        Args:
            raw_text: Extracted statement text

        Returns:
            Template ID if found, None otherwise
        """
        if not raw_text or not raw_text.strip():
            logger.error("No text to detect a template from")
            return None

        for template_id, template_config in self.templates.items():
            if self._matches_template(raw_text, template_config):
                logger.info(f"Statement matches template: {template_id}")
                return template_id

        logger.warning("No matching template found")
        return None

    def resolve_template(self, raw_text: str) -> Optional[str]:
        """
        Detect the template, falling back to the only loaded template.

        A statement with a damaged header still fails detection, so with a
        single template it is parsed anyway and the header extractor reports
        the field that is missing.
        """
        template_id = self.detect_template(raw_text)
        if template_id is None and len(self.templates) == 1:
            template_id = next(iter(self.templates))
            logger.warning(f"Falling back to the only available template: {template_id}")
        return template_id

    def _matches_template(self, raw_text: str, template_config: Dict[str, Any]) -> bool:
        """
        Check whether every required anchor appears in the text.

        Anchors are matched with a fuzzy partial ratio so small text
        extraction differences (a dropped letter, odd spacing) still match.
        """
        page_match = template_config.get('page_match', {})
        must_contain = page_match.get('must_contain', [])
        fuzzy_threshold = page_match.get('fuzzy_threshold', 85)

        if not must_contain:
            logger.warning("Template has no 'must_contain' requirements")
            return False

        text = ' '.join(raw_text.split()).lower()
        found = 0
        for anchor in must_contain:
            confidence = fuzz.partial_ratio(anchor.lower(), text)
            if confidence >= fuzzy_threshold:
                found += 1
                logger.debug(f"Found anchor '{anchor}' with confidence {confidence:.1f}")
            else:
                logger.debug(f"Anchor '{anchor}' not found (best confidence {confidence:.1f})")

        return found == len(must_contain)

    def get_template(self, template_id: str) -> Optional[Dict[str, Any]]:
        """Get template configuration by ID."""
        return self.templates.get(template_id)

    def list_templates(self) -> List[str]:
        """List all available template IDs."""
        return list(self.templates.keys())


def detect_template(raw_text: str) -> Optional[str]:
    """
    Convenience function to detect the template of a statement text.

    Args:
        raw_text: Extracted statement text

    Returns:
        Template ID if found, None otherwise
    """
    detector = TemplateDetector()
    return detector.detect_template(raw_text)


def resolve_template(raw_text: str) -> Optional[str]:
    """Detect the template of a statement text, or fall back to the only one loaded."""
    return TemplateDetector().resolve_template(raw_text)
