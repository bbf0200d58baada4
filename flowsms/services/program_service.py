"""
Project programme (Gantt) data.

Programmes are maintained by hand in ``flowsms/data/programs.json`` and
read once per process.  ``project_id`` matches a building plot no. or
marketing name from the building-info feed.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path

from flowsms.core.exceptions import NotFoundError

logger = logging.getLogger(__name__)

PROGRAMS_FILE = Path(__file__).resolve().parent.parent / "data" / "programs.json"

STAGE_STATUSES = ("completed", "in_progress", "upcoming", "on_hold", "cancelled")
STAGE_CATEGORIES = ("design", "approvals", "construction", "handover")


@lru_cache(maxsize=1)
def load_programs():
    with open(PROGRAMS_FILE, "r", encoding="utf-8") as f:
        programs = json.load(f)["programs"]
    logger.info("Loaded %d project programmes from %s", len(programs), PROGRAMS_FILE.name)
    return tuple(programs)


def list_programs(project_name=None):
    """All programmes, optionally filtered by a case-insensitive name fragment."""
    programs = list(load_programs())
    if project_name:
        needle = project_name.lower()
        programs = [p for p in programs if needle in p["project_name"].lower()]
    return programs


def get_program(project_id):
    """One programme by project id (case-insensitive exact match)."""
    key = (project_id or "").lower()
    for program in load_programs():
        if program["project_id"].lower() == key:
            return program
    raise NotFoundError(resource="Program", resource_id=project_id)
