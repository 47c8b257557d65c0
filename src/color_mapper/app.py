from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Optional

import numpy as np
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .catalog import HUES, HueDefinition, hue_by_angle, hue_by_id
from .clustering import compute_clusters, territory_map
from .config import DEFAULT_CONFIG, MapperConfig
from .gamut import OklchColor, gamut_boundary, peak_lightness, to_css, to_gamut_hex
from .moderation import Moderator, StubModerator, submit_name
from .prefixes import suggest_prefixes
from .sampler import ColorSampler
from .seed import generate_seed_data
from .shader import generate_shader_palette
from .store import EntryStore

log = logging.getLogger(__name__)


def parse_hue(val: str | None, rng: np.random.Generator | None = None) -> HueDefinition:
    """Catalog hue by angle or id; a random one when ``val`` is empty."""
    raw = (val or "").strip().lower()
    if not raw:
        g = rng or np.random.default_rng()
        return HUES[int(g.integers(len(HUES)))]
    try:
        return hue_by_angle(float(raw))
    except ValueError:
        return hue_by_id(raw)


def parse_float(args: Mapping[str, Any], key: str) -> float:
    val = args.get(key)
    if val is None:
        raise ValueError(f"missing '{key}'")
    try:
        out = float(val)
    except (TypeError, ValueError):
        raise ValueError(f"'{key}' must be a number") from None
    if not math.isfinite(out):
        raise ValueError(f"'{key}' must be finite")
    return out


def describe(color: OklchColor, cfg: MapperConfig) -> dict[str, Any]:
    return {
        "color": color.to_dict(),
        "hex": to_gamut_hex(color.l, color.c, color.h),
        "css": to_css(color),
        "prefixes": suggest_prefixes(
            color, cfg.prefix_count, chroma_weight=cfg.prefix_chroma_weight
        ),
        "shader": generate_shader_palette(color).to_dict(),
    }


# ----------------------------- Flask app ----------------------------------


def create_app(
    config: MapperConfig | None = None,
    store: EntryStore | None = None,
    moderator: Optional[Moderator] = None,
    *,
    seed: bool = False,
    rng: np.random.Generator | None = None,
) -> Flask:
    app = Flask(__name__)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    cfg = config or DEFAULT_CONFIG
    rng = rng or np.random.default_rng()
    store = store if store is not None else EntryStore()
    moderator = moderator or StubModerator()
    sampler = ColorSampler(rng=rng, max_tries=cfg.sampler_max_tries)
    if seed:
        for e in generate_seed_data(rng):
            store.append(e)

    app.config["MAPPER"] = cfg
    app.extensions["color_mapper.store"] = store

    @app.errorhandler(ValueError)
    def bad_request(exc: ValueError):
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(Exception)
    def internal_error(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        log.exception("request failed")
        return jsonify({"error": str(exc)}), 500

    @app.route("/hues")
    def hues():
        return jsonify([h.to_dict() for h in HUES])

    @app.route("/question")
    def question():
        hue = parse_hue(request.args.get("hue"), rng)
        sample = sampler.sample(hue.angle)
        out = describe(sample.color, cfg)
        out["hue"] = hue.to_dict()
        out["zone"] = sample.zone.name
        return jsonify(out)

    @app.route("/prefixes")
    def prefixes():
        color = OklchColor(
            parse_float(request.args, "l"),
            parse_float(request.args, "c"),
            parse_float(request.args, "h"),
        )
        return jsonify(
            suggest_prefixes(
                color, cfg.prefix_count, chroma_weight=cfg.prefix_chroma_weight
            )
        )

    @app.route("/gamut")
    def gamut():
        hue = parse_hue(request.args.get("hue"), rng)
        peak_l, peak_c = peak_lightness(hue.angle)
        return jsonify(
            {
                "hue": hue.to_dict(),
                "boundary": gamut_boundary(hue.angle),
                "peak": {"l": peak_l, "maxC": peak_c},
            }
        )

    def hue_clusters(hue: HueDefinition):
        return compute_clusters(
            store.snapshot(),
            hue=hue.angle,
            threshold=cfg.cluster_threshold,
            chroma_weight=cfg.cluster_chroma_weight,
        )

    @app.route("/clusters")
    def clusters():
        hue = parse_hue(request.args.get("hue"), rng)
        result = hue_clusters(hue)
        return jsonify(
            {"hue": hue.to_dict(), "clusters": [c.to_dict() for c in result]}
        )

    @app.route("/territories")
    def territories():
        result = hue_clusters(parse_hue(request.args.get("hue"), rng))
        grid = territory_map(result, cfg.chart_width, cfg.chart_height)
        return jsonify(
            {
                "width": cfg.chart_width,
                "height": cfg.chart_height,
                "labels": [c.display_label for c in result],
                "cells": grid.tolist(),
            }
        )

    @app.route("/entries", methods=["GET"])
    def list_entries():
        return jsonify([e.to_dict() for e in store.snapshot()])

    @app.route("/entries", methods=["POST"])
    def add_entry():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            raise ValueError("body must be a JSON object")
        color = OklchColor.from_dict(body.get("color"))
        hue = hue_by_angle(color.h)
        name = body.get("name")
        if not isinstance(name, str):
            raise ValueError("'name' must be a string")
        entry, verdict = submit_name(store, color, name, moderator, hue.name_zh)
        return jsonify({"entry": entry.to_dict(), "verdict": verdict.to_dict()}), 201

    @app.route("/export")
    def export():
        return app.response_class(store.export_json(), mimetype="application/json")

    @app.route("/import", methods=["POST"])
    def restore():
        total = store.import_json(request.get_data(as_text=True))
        return jsonify({"stored": total})

    @app.route("/prune", methods=["POST"])
    def prune():
        return jsonify(store.prune(max_age_days=cfg.prune_max_age_days).to_dict())

    return app


if __name__ == "__main__":
    create_app(seed=True).run(debug=False, threaded=True)
