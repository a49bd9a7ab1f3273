"""End-to-end generation of Xray results from a Playwright report."""

import asyncio
import logging
from datetime import datetime, timezone

from xray_bridge.assembler import Assembly, assemble_payload, build_info
from xray_bridge.config import XraySettings
from xray_bridge.loaders import load_mapping, load_report
from xray_bridge.writer import write_payload

log = logging.getLogger(__name__)


async def generate_results(
    settings: XraySettings, now: datetime | None = None
) -> Assembly:
    """Read the report and mapping, assemble the payload and write it.

    Any loading or writing failure propagates; nothing is written unless both
    inputs load successfully.
    """
    log.info("Reading test results from %s", settings.results_path)
    log.info("Reading test mapping from %s", settings.mapping_path)
    report, mapping = await asyncio.gather(
        load_report(settings.results_path),
        load_mapping(settings.mapping_path),
    )

    info = build_info(settings, report, now or datetime.now(timezone.utc))
    assembly = assemble_payload(report, mapping, info)
    log.info(
        "Assembled %d Xray test result(s), %d unmapped",
        len(assembly.payload.tests),
        assembly.unmapped,
    )

    await write_payload(assembly.payload, settings.output_path)
    return assembly
