import argparse
import sys
from pathlib import Path

# Add the repo root and backend/ to Python path for imports
ROOT = Path(__file__).resolve().parents[1]
for p in (ROOT, ROOT / "backend"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from adif_io.adif_writer import write_document
from models.log_types import LogType, normalize_mode
from app.core.config import get_settings
from app.exceptions import LexError, UnknownDialectError
from app.schemas.award import AwardJudgmentModel
from app.services.award import AwardPeriod, judge_award_csv
from app.services.fle.compiler import compile_fle
from app.services.logconv.base import ImportOptions
from app.services.logconv.registry import get_reader, get_writer


def _write_files(files, out_dir):
    for name, text in sorted(files.items()):
        path = str(Path(out_dir) / name)
        write_document(path, text)
        print(f"wrote {path}")


def _report(errors, stream=sys.stderr):
    for e in errors:
        print(f"line {e.line}: {e.message}", file=stream)


def _writer(target):
    settings = get_settings()
    return get_writer(
        target,
        program_id=settings.adif_program_id,
        program_version=settings.adif_program_version,
    )


def cmd_compile(args) -> int:
    try:
        writer = _writer(args.target) if args.target else None
    except UnknownDialectError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    try:
        result = compile_fle(Path(args.file).read_bytes())
    except LexError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    for e in result.errors:
        print(f"line {e.line} col {e.column}: {e.kind.value}: {e.message}", file=sys.stderr)
    print(f"{len(result.records)} records, {len(result.errors)} errors, log type {result.log_type}")
    if writer is not None:
        files, errors = writer.write_files(result.records)
        _report(errors)
        _write_files(files, args.out)
    return 1 if result.errors else 0


def cmd_convert(args) -> int:
    settings = get_settings()
    try:
        reader = get_reader(args.dialect)
        writer = _writer(args.target)
    except UnknownDialectError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    options = ImportOptions(
        my_callsign=(args.my_call or "").upper(),
        my_ref_source=args.my_ref_source,
        his_ref_source=args.his_ref_source,
        summit=args.summit.upper() if args.summit else None,
        parks=tuple(p.strip().upper() for p in (args.parks or "").split(",") if p.strip()),
        wwff=args.wwff.upper() if args.wwff else None,
        local_offset_minutes=settings.hamlog_local_offset_minutes,
    )
    text = Path(args.file).read_text(encoding=args.encoding)
    imported = reader.read(text, options)
    _report(imported.errors)
    files, errors = writer.write_files(imported.records)
    _report(errors)
    print(f"imported {imported.imported}, skipped {imported.skipped}, errors {len(imported.errors)}")
    _write_files(files, args.out)
    return 1 if imported.errors or errors else 0


def cmd_judge(args) -> int:
    try:
        mode = normalize_mode(args.mode)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    text = Path(args.file).read_text(encoding="utf-8-sig")
    result = judge_award_csv(text, mode, AwardPeriod.from_settings())
    if result.log_type == LogType.UNKNOWN:
        print("error: could not detect log type (expected 10 or 11 columns)", file=sys.stderr)
        return 2
    _report(result.errors)
    print(AwardJudgmentModel.from_result(result).model_dump_json(by_alias=True, indent=2))
    return 0


def main(argv=None):
    ap = argparse.ArgumentParser("fle-logbook", description="FLE compiler, log converter and award judge")
    sub = ap.add_subparsers(dest="command", required=True)

    c = sub.add_parser("compile", help="compile an FLE text file")
    c.add_argument("file")
    c.add_argument("--target", help="also export: sota-csv | pota-adif | wwff-adif")
    c.add_argument("--out", default=".", help="output directory for exports")
    c.set_defaults(func=cmd_compile)

    v = sub.add_parser("convert", help="convert a HAMLOG/ADIF/SOTA CSV log")
    v.add_argument("file")
    v.add_argument("--dialect", required=True, help="hamlog | hamlog-ios | adif | sota-csv")
    v.add_argument("--target", required=True, help="sota-csv | pota-adif | wwff-adif")
    v.add_argument("--my-call")
    v.add_argument("--my-ref-source", default="user_defined", choices=["rmks1", "rmks2", "user_defined", "none"])
    v.add_argument("--his-ref-source", default="none", choices=["rmks1", "rmks2", "qth", "none"])
    v.add_argument("--summit", help="my SOTA summit when --my-ref-source=user_defined")
    v.add_argument("--parks", help="my POTA parks, comma separated")
    v.add_argument("--wwff", help="my WWFF reference")
    v.add_argument("--encoding", default="utf-8-sig", help="input encoding (HAMLOG exports are often cp932)")
    v.add_argument("--out", default=".", help="output directory")
    v.set_defaults(func=cmd_convert)

    j = sub.add_parser("judge", help="judge a SOTA CSV log for the award")
    j.add_argument("file")
    j.add_argument("--mode", default="strict", help="strict | lenient")
    j.set_defaults(func=cmd_judge)

    args = ap.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
