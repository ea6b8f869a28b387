"""Shooting schedule generation.

The pipeline runs aggregate -> profile -> partition, then per batch
instruct -> generate -> recover (or fall back), and finally assemble.
"""

from stripboard.scheduling.aggregator import aggregate_scenes
from stripboard.scheduling.assembler import (
    AssemblyContext,
    BatchResult,
    assemble_schedule,
    renumber_days,
)
from stripboard.scheduling.caps import DayCaps, arc_max_days
from stripboard.scheduling.fallback import build_fallback_days
from stripboard.scheduling.generator import ScheduleGenerator, generate_schedule
from stripboard.scheduling.instructions import (
    ScheduleInstruction,
    build_schedule_instruction,
)
from stripboard.scheduling.parser import (
    ParseOutcome,
    RecoveryLayer,
    map_days,
    parse_or_recover,
)
from stripboard.scheduling.partitioner import Batch, partition_batches, scenes_for_batch
from stripboard.scheduling.profiler import LocationProfile, profile_locations
from stripboard.scheduling.rehearsals import RehearsalSuggester, with_rehearsals

__all__ = [
    "AssemblyContext",
    "Batch",
    "BatchResult",
    "DayCaps",
    "LocationProfile",
    "ParseOutcome",
    "RecoveryLayer",
    "RehearsalSuggester",
    "ScheduleGenerator",
    "ScheduleInstruction",
    "aggregate_scenes",
    "arc_max_days",
    "assemble_schedule",
    "build_fallback_days",
    "build_schedule_instruction",
    "generate_schedule",
    "map_days",
    "parse_or_recover",
    "partition_batches",
    "profile_locations",
    "renumber_days",
    "scenes_for_batch",
    "with_rehearsals",
]
