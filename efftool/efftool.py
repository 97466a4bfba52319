#!/usr/bin/env python3
"""Convert EFF files to and from JSON.

    efftool fighter/mario/effect/ef_mario.eff          -> ef_mario.eff.json + ef_mario.ptcl
    efftool ef_mario.eff.json                           -> ef_mario.eff (+ ef_mario.ptcl if present)

Inputs ending in .json are encoded, anything else is decoded.
"""

import logging
import sys

from pathlib import Path
from argparse import ArgumentParser

from . import jsonio
from .eff import EffFile
from .effdata import EffData
from .errors import EffError

logger = logging.getLogger("efftool")

argparser = ArgumentParser(prog="efftool", description="Convert EFF files to and from JSON")
argparser.add_argument("input", type=Path, help="EFF or JSON file")
argparser.add_argument("output", type=Path, nargs="?", help="EFF or JSON file to write")
argparser.add_argument("ptcl", type=Path, nargs="?", help="PTCL resource to write or embed")
argparser.add_argument("--friendly", action="store_true",
    help="use the hand-editable document with names and flags resolved")
argparser.add_argument("-v", "--verbose", action="store_true")

def eff_paths(path, output=None, ptcl=None):
    """Default output and ptcl paths for an EFF input."""
    if output is None:
        output = path.with_name(path.name + ".json")
    if ptcl is None:
        ptcl = path.with_suffix(".ptcl")
    return output, ptcl

def json_paths(path, output=None, ptcl=None):
    """Default output and ptcl paths for a JSON input."""
    base = path.with_suffix("")
    if output is None:
        output = base if base.suffix.lower() == ".eff" else path.with_suffix(".eff")
    if ptcl is None:
        ptcl = base.with_suffix(".ptcl")
    return output, ptcl

def decode(path, output, ptcl, friendly=False):
    output, ptcl = eff_paths(path, output, ptcl)
    eff = EffFile.parse(path.read_bytes())
    doc = EffData.from_eff(eff).to_dict() if friendly else eff.to_dict()
    text = jsonio.dumps(doc)

    # resource first so a failure leaves neither file behind
    if eff.resource_data is not None:
        ptcl.write_bytes(eff.resource_data)
        logger.info("wrote %s (%d bytes)", ptcl, len(eff.resource_data))
    try:
        output.write_text(text, encoding="utf-8")
    except OSError:
        if eff.resource_data is not None:
            ptcl.unlink()
        raise
    logger.info("wrote %s", output)

def encode(path, output, ptcl, friendly=False):
    output, ptcl = json_paths(path, output, ptcl)
    doc = jsonio.loads(path.read_bytes())
    resource = ptcl.read_bytes() if ptcl.is_file() else None
    if resource is None:
        logger.info("no resource at %s, writing EFF without one", ptcl)

    model = EffData if friendly else EffFile
    data = model.from_dict(doc, resource_data=resource).build()

    output.write_bytes(data)
    logger.info("wrote %s (%d bytes)", output, len(data))

def main(argv=None):
    args = argparser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    convert = encode if args.input.suffix.lower() == ".json" else decode
    try:
        convert(args.input, args.output, args.ptcl, friendly=args.friendly)
    except EffError as e:
        logger.error("%s: %s: %s", args.input, type(e).__name__, e)
        return 1
    except OSError as e:
        logger.error("%s", e)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
