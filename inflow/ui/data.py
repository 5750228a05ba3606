from __future__ import annotations
import logging
from typing import Optional

from .state import LoadedData
from inflow.config import PipelinePolicy
from inflow.data import load_dataset_from_source
from inflow.regression import fit_sensitivity


def load_all(source: str, policy: Optional[PipelinePolicy] = None) -> LoadedData:
    """Fetch + parse the dataset once and fit the sensitivity model.

    Raises inflow.errors.DataFormatError when the source is unusable.
    """
    policy = policy or PipelinePolicy()
    dataset = load_dataset_from_source(source, policy)
    model = fit_sensitivity(dataset, policy.fit_strategy)
    logging.getLogger(__name__).info("Pipeline ready (source=%s, policy=%s)", source, policy)
    return LoadedData(dataset=dataset, model=model, policy=policy, source=source)

__all__ = ["load_all"]
