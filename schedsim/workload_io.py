from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Iterable, List, Sequence

from .models import Process

CSV_FIELDS = ["pid", "arrival_time", "burst_time", "priority"]


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def save_workload(processes: Sequence[Process], path: str | Path) -> Path:
    """
    Write processes to a JSON or CSV file, chosen by suffix.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        with path.open("w", encoding="utf-8") as f:
            json.dump([p.to_dict() for p in processes], f, indent=2)
            f.write("\n")
        return path

    if suffix == ".csv":
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            writer.writeheader()
            for p in processes:
                writer.writerow(
                    {
                        "pid": p.pid,
                        "arrival_time": p.arrival_time,
                        "burst_time": p.burst_time,
                        "priority": p.priority,
                    }
                )
        return path

    raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def processes_from_records(records: Iterable) -> List[Process]:
    """
    Convert already-decoded mappings (e.g. a JSON request body) to processes.
    """
    if isinstance(records, (str, bytes, dict)) or not isinstance(records, Iterable):
        raise ValueError("workload must be a list of process objects")
    return [_process_from_mapping(entry) for entry in records]


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if isinstance(raw, dict):
        raw = raw.get("processes")
    if not isinstance(raw, list):
        raise ValueError("JSON workload must be a list of process objects")

    return processes_from_records(raw)


def _load_csv(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        return processes_from_records(list(reader))


def _pick(mapping, *keys):
    for key in keys:
        if key in mapping:
            return mapping[key]
    raise KeyError(keys[0])


def _as_int(value) -> int:
    """
    Accept real integers and integer strings (CSV cells). Floats and booleans
    are rejected rather than truncated.
    """
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value.strip())
    raise TypeError(f"expected an integer, got {value!r}")


def _process_from_mapping(mapping) -> Process:
    try:
        pid = _as_int(_pick(mapping, "pid", "id"))
        arrival_time = _as_int(_pick(mapping, "arrival_time", "arrivalTime"))
        burst_time = _as_int(_pick(mapping, "burst_time", "burstTime"))
        priority_val = mapping.get("priority")
        priority = _as_int(priority_val) if priority_val not in (None, "") else 0
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )
