"""Configuration parsing and validation."""


from copy import deepcopy
from typing import Any, Dict, Mapping, Sequence

import yaml

from factorysim.admission import AdmissionPolicy, get_admission_policy_by_type
from factorysim.errors import ConfigError
from factorysim.product import ProductType

DEFAULT_CAPACITIES = {"machines": 10, "operators": 5}
DEFAULT_STAGE_NAMES = ("machining", "assembly", "quality_control", "packaging")
DEFAULT_STAGE_RESOURCES = {
    "machining": "machines",
    "assembly": "operators",
    "quality_control": "operators",
    "packaging": "machines",
}
DEFAULT_PRODUCT_TYPES = {
    "ProductA": {"durations": [2.0, 1.5, 1.0, 1.0], "setup": 0.5},
    "ProductB": {"durations": [3.0, 2.0, 1.5, 1.5], "setup": 0.75},
}
DEFAULT_ARRIVALS = {"ProductA": 1.0}


def make_product_types(
    cfg: Mapping[str, Any], stage_names: Sequence[str]
) -> Dict[str, ProductType]:
    """Build product types from `name -> {durations, setup}` mapping.

    Values that already are ProductType objects are passed through, a bare
    list is read as the stage durations without setup.
    """
    out = {}
    for name, spec in cfg.items():
        if isinstance(spec, ProductType):
            out[name] = spec
            continue
        if isinstance(spec, (list, tuple)):
            spec = {"durations": spec}
        elif not isinstance(spec, Mapping):
            raise ConfigError(
                f"Product type '{name}' must be a mapping or a list of "
                f"durations, got {spec!r}"
            )
        durations = spec.get("durations", spec.get("stages"))
        if not durations:
            raise ConfigError(f"Product type '{name}' has no stages")
        try:
            out[name] = ProductType.from_durations(
                name, durations, stage_names, spec.get("setup", 0.0)
            )
        except ValueError as e:
            raise ConfigError(str(e)) from e

    return out


def make_admission(cfg: str | Mapping | AdmissionPolicy | None):
    if cfg is None:
        cfg = "drop"
    if isinstance(cfg, AdmissionPolicy):
        return cfg
    if isinstance(cfg, str):
        cfg = {"type": cfg}

    cfg = {k.replace("-", "_"): v for k, v in cfg.items()}
    policy_type = cfg.pop("type", "drop")
    try:
        return get_admission_policy_by_type(policy_type, **cfg)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid admission policy: {e}") from e


def validate(
    capacities: Mapping[str, int],
    product_types: Mapping[str, ProductType],
    stage_resources: Mapping[str, str],
    arrivals: Mapping[str, float],
):
    """Reject configurations that would fail during a run."""
    for resource_class, capacity in capacities.items():
        if not isinstance(capacity, int) or capacity < 0:
            raise ConfigError(
                f"Capacity of '{resource_class}' must be a non-negative "
                f"integer, got {capacity!r}"
            )

    for name, product_type in product_types.items():
        if product_type.setup_duration < 0:
            raise ConfigError(f"Negative setup duration for '{name}'")
        for stage in product_type.stages:
            if stage.duration < 0:
                raise ConfigError(
                    f"Negative duration for stage '{stage.name}' of '{name}'"
                )
            if stage.name not in stage_resources:
                raise ConfigError(
                    f"Stage '{stage.name}' has no resource class"
                )
            resource_class = stage_resources[stage.name]
            if resource_class not in capacities:
                raise ConfigError(
                    f"Resource class '{resource_class}' of stage "
                    f"'{stage.name}' has no capacity"
                )

    for name, rate in arrivals.items():
        if name not in product_types:
            raise ConfigError(f"Arrivals for unknown product type '{name}'")
        if rate <= 0:
            raise ConfigError(
                f"Arrival rate of '{name}' must be positive, got {rate}"
            )


def parse_config(path: str) -> Dict[str, Any]:
    """Parse factory configuration file into Simulation keyword arguments."""
    with open(path, "r") as f:
        cfg = yaml.safe_load(f.read()) or {}

    out = {}
    if "resources" in cfg:
        out["capacities"] = {
            r["id"]: r["capacity"] for r in deepcopy(cfg["resources"])
        }
    if "stages" in cfg:
        stages = deepcopy(cfg["stages"])
        out["stage_names"] = [s["id"] for s in stages]
        out["stage_resources"] = {s["id"]: s["resource"] for s in stages}
    if "products" in cfg:
        product_types = {}
        arrivals = {}
        for product in deepcopy(cfg["products"]):
            id_ = product.pop("id")
            if "arrival-rate" in product:
                arrivals[id_] = product.pop("arrival-rate")
            product_types[id_] = product
        out["product_types"] = product_types
        if arrivals:
            out["arrivals"] = arrivals
    if "admission" in cfg:
        out["admission"] = cfg["admission"]

    # Extra attributes
    for key, kwd in [
        ("name", "name"),
        ("id", "uid"),
        ("seed", "seed"),
        ("randomize", "randomize"),
        ("monitor", "monitor"),
        ("horizon", "horizon"),
        ("shift-length", "shift_length"),
        ("repair-duration", "repair_duration"),
        ("report-path", "report_path"),
    ]:
        if key in cfg:
            out[kwd] = cfg[key]

    return out
