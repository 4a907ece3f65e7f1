import json
import os
from typing import Dict, Optional, Tuple
from task import Task, Core, Platform, Application, Schedule
from logging_config import LoggingFlags, log_if

SAMPLE_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'sample_data')


def parse_instance(data: Dict) -> Tuple[Platform, Application, Optional[Schedule]]:
    """Build the platform, the application and, if present, the schedule of an instance"""
    platform = Platform([Core(c["id"], [float(p) for p in c["power"]]) for c in data["cores"]])
    tasks = []
    for t in data["tasks"]:
        if float(t["type"]) != int(t["type"]):
            raise ValueError(f"Task {t['id']} has non-integer type {t['type']}")
        tasks.append(Task(t["id"], int(t["type"])))
    application = Application(tasks)

    schedule = None
    if "schedule" in data:
        s = data["schedule"]
        schedule = Schedule(
            cores=platform.n_cores,
            tasks=len(application),
            mapping=s["mapping"],
            start=s["start"],
            finish=s["finish"],
            span=s.get("span"),
        )

    log_if(LoggingFlags.LOADING,
           f"Loaded instance: {platform.n_cores} cores, {len(application)} tasks, "
           f"schedule={'yes' if schedule is not None else 'no'}")
    return platform, application, schedule


def load_input_from_json(json_file):
    with open(json_file, 'r') as f:
        data = json.load(f)

    log_if(LoggingFlags.LOADING, f"Reading instance from '{json_file}'")
    return parse_instance(data)


def create_sample_system():
    """Load the sample instance shipped with the repository"""
    return load_input_from_json(os.path.join(SAMPLE_DATA_DIR, 'instance_000.json'))
