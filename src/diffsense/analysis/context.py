"""Wire the git gateway to the classifier."""

from __future__ import annotations

import logging
from typing import Optional

from diffsense.analysis.classifier import ChangeClassifier
from diffsense.analysis.models import ContextAnalysis, ContextOptions
from diffsense.git.adapter import GitGateway
from diffsense.git.models import DiffOptions

logger = logging.getLogger(__name__)


class ContextBuilder:
    """Build a ContextAnalysis for the changes selected by ContextOptions."""

    def __init__(self, gateway: GitGateway, classifier: Optional[ChangeClassifier] = None) -> None:
        self.gateway = gateway
        self.classifier = classifier

    def build(self, options: ContextOptions = ContextOptions()) -> ContextAnalysis:
        logger.debug("Building context (staged=%s, range=%s)", options.staged, options.range)
        changes = self.gateway.changed_files(
            DiffOptions(staged=options.staged, range=options.range)
        )
        classifier = self.classifier or ChangeClassifier(options.scope_map)
        return classifier.analyze(changes)
