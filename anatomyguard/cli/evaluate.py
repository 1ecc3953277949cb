from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import anatomyguard.lib.cli as click
import anatomyguard.lib.json
from anatomyguard.core import di
from anatomyguard.llm.evaluation import DocumentEncoder, EvaluationPipeline, output_schema
from anatomyguard.model import EvaluationReport

_path = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.group()
def evaluate(): ...


@evaluate.command(name="run")
@click.argument("artifact", type=_path)
@click.argument("feedback", type=_path)
@click.option("-O", "--output", type=click.Path(dir_okay=False, writable=True, path_type=Path), default=None)
@click.option("--artifact-type", default=None, help="media type of ARTIFACT, if it cannot be guessed from its name")
@click.option("--feedback-type", default=None, help="media type of FEEDBACK, if it cannot be guessed from its name")
@di.inject
def run(
    artifact: Path,
    feedback: Path,
    output: Path | None,
    artifact_type: str | None,
    feedback_type: str | None,
    encoder: DocumentEncoder = di.Provide["llm.encoder"],
    pipeline: EvaluationPipeline = di.Provide["llm.pipeline"],
):
    """Produce an audited evaluation report from an artifact bundle and a human feedback document."""
    encoded_artifact = encoder.encode_path(artifact, media_type=artifact_type)
    encoded_feedback = encoder.encode_path(feedback, media_type=feedback_type)
    report: EvaluationReport = asyncio.run(pipeline.evaluate_encoded(encoded_artifact, encoded_feedback))

    rendered = report.model_dump_json(indent=2)
    if output is None:
        click.echo(rendered)
    else:
        output.write_text(rendered + "\n", encoding="utf8")
        click.echo(f"wrote {output}", file=sys.stderr)

    verification = report.score_verification
    click.echo(
        click.style(
            f"score audit: {verification.status.value}",
            fg="green" if verification.discrepancy_explanation is None else "yellow",
        ),
        file=sys.stderr,
    )
    for anomaly in verification.anomalies:
        click.echo(click.style(f"anomaly: {anomaly}", fg="yellow"), file=sys.stderr)


@evaluate.command(name="schema")
def schema():
    """Print the JSON schema contract sent to the generation gateway."""
    click.echo(anatomyguard.lib.json.dumps(output_schema(), indent=2))
