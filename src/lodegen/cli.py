"""
Command line entry point.

    lodegen train --corpus levels/ --output model.json
    lodegen generate --model model.json --count 5 --output-dir out/ --preview
    lodegen validate out/*.txt --full
"""

from __future__ import annotations

import argparse
import logging
import os
from typing import Optional, Sequence

from lodegen.config import DEFAULT_CONFIG_PATH
from lodegen.level.constructive_generator import ConstructiveLevelGenerator
from lodegen.level.corpus import get_sample_levels, load_level_file, load_levels_from_dir, save_level_file
from lodegen.level.generation_config import GenerationConfig, load_generation_config
from lodegen.level.level_generator import LevelGenerator
from lodegen.level.markov_model import TransitionTable
from lodegen.level.reachability import validate_level, validate_level_full
from lodegen.level.seed_manager import SeedManager
from lodegen.tiles.tile_renderer import TileRenderer

logger = logging.getLogger("lodegen")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID = 2


def _load_corpus(directory: Optional[str]):
    if directory is None:
        return get_sample_levels()
    levels = load_levels_from_dir(directory)
    if not levels:
        raise ValueError(f"No usable levels found in {directory}")
    return levels


def cmd_train(args: argparse.Namespace) -> int:
    corpus = _load_corpus(args.corpus)
    generator = LevelGenerator()
    table = generator.train(corpus, augment=not args.no_augment)
    table.save_to_json(args.output)
    for context, tiles in table.most_common_patterns(args.top):
        print(f"{context:>8}  {tiles}")
    return EXIT_OK


def _apply_overrides(config: GenerationConfig, args: argparse.Namespace) -> GenerationConfig:
    data = config.to_dict()
    for key in ("width", "height", "gold_count", "enemy_count", "max_attempts", "seed"):
        value = getattr(args, key)
        if value is not None:
            data[key] = value
    if args.full_solve:
        data["require_full_solve"] = True
    return GenerationConfig.from_dict(data)


def cmd_generate(args: argparse.Namespace) -> int:
    config = _apply_overrides(load_generation_config(args.config), args)

    if args.method == "constructive":
        seeds = SeedManager(config.seed)
        builder = ConstructiveLevelGenerator()
        levels = []
        for index in range(args.count):
            level = builder.generate(config, seeds.level_rng(index).random)
            levels.append((level, validate_level(level).valid))
    else:
        if args.model:
            generator = LevelGenerator(TransitionTable.load_from_json(args.model))
        else:
            generator = LevelGenerator()
            generator.train(_load_corpus(args.corpus), augment=config.augment)
        results = generator.generate_batch(args.count, config)
        levels = [(r.level, r.validation.valid) for r in results]

    renderer = None
    if args.preview:
        renderer = TileRenderer()

    invalid = 0
    for index, (level, valid) in enumerate(levels):
        path = os.path.join(args.output_dir, f"level{index + 1:03d}.txt")
        save_level_file(level, path)
        if renderer is not None:
            renderer.save_preview(level, os.path.splitext(path)[0] + ".png")
        if not valid:
            invalid += 1
            logger.warning("%s did not pass validation", path)
        print(f"{path}: {'valid' if valid else 'INVALID'}")

    logger.info("Wrote %d levels to %s (%d invalid)", len(levels), args.output_dir, invalid)
    return EXIT_OK if invalid == 0 else EXIT_INVALID


def cmd_validate(args: argparse.Namespace) -> int:
    all_valid = True
    for path in args.levels:
        try:
            level = load_level_file(path)
        except (OSError, ValueError) as e:
            logger.error("Cannot read %s: %s", path, e)
            return EXIT_ERROR

        result = validate_level_full(level) if args.full else validate_level(level)
        all_valid = all_valid and result.valid
        print(f"{path}: {'valid' if result.valid else 'INVALID'} "
              f"({len(result.reachable_gold)} reachable gold, "
              f"{len(result.unreachable_gold)} unreachable)")
        for issue in result.issues:
            print(f"  - {issue}")
    return EXIT_OK if all_valid else EXIT_INVALID


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="lodegen", description="Generate and validate Lode Runner levels.")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = p.add_subparsers(dest="command", required=True)

    train = sub.add_parser("train", help="Train a transition table from a level corpus.")
    train.add_argument("--corpus", default=None,
                       help="Directory of level .txt files (default: embedded samples)")
    train.add_argument("--output", default="model.json", help="Model JSON path (default: model.json)")
    train.add_argument("--no-augment", action="store_true", help="Do not train on mirrored levels.")
    train.add_argument("--top", type=int, default=10, help="How many strong patterns to print.")
    train.set_defaults(func=cmd_train)

    gen = sub.add_parser("generate", help="Generate level files.")
    gen.add_argument("--model", default=None, help="Trained model JSON.")
    gen.add_argument("--corpus", default=None,
                     help="Train on this directory when no model is given (default: embedded samples)")
    gen.add_argument("--config", default=DEFAULT_CONFIG_PATH,
                     help=f"Generation config JSON (default: {DEFAULT_CONFIG_PATH}). "
                          "When the file is missing the built-in defaults are used "
                          "(28x16, 5 gold, 2 enemies).")
    gen.add_argument("--count", type=int, default=1, help="How many levels to generate.")
    gen.add_argument("--output-dir", default="levels", help="Output folder (default: levels)")
    gen.add_argument("--method", choices=("markov", "constructive"), default="markov")
    gen.add_argument("--seed", type=int, default=None, help="RNG seed for reproducible output.")
    gen.add_argument("--width", type=int, default=None)
    gen.add_argument("--height", type=int, default=None)
    gen.add_argument("--gold", dest="gold_count", type=int, default=None)
    gen.add_argument("--enemies", dest="enemy_count", type=int, default=None)
    gen.add_argument("--max-attempts", type=int, default=None)
    gen.add_argument("--full-solve", action="store_true",
                     help="Require levels that can be completed and escaped.")
    gen.add_argument("--preview", action="store_true", help="Also write a PNG preview per level.")
    gen.set_defaults(func=cmd_generate)

    val = sub.add_parser("validate", help="Check level files for reachability.")
    val.add_argument("levels", nargs="+", help="Level .txt files")
    val.add_argument("--full", action="store_true", help="Also check that the level can be completed.")
    val.set_defaults(func=cmd_validate)
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if getattr(args, "count", 1) <= 0:
        raise SystemExit("count must be > 0")

    try:
        return args.func(args)
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
