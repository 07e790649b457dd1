"""
Command line entry point for the processing-time predictor.
"""

import argparse
from typing import Optional

from dotenv import load_dotenv

from timepredictor.core.predictor import create_time_predictor
from timepredictor.db.crud import load_historical_records
from timepredictor.db.database import SessionLocal, init_db
from timepredictor.models.schemas import ContentType, PredictionInput, PredictionResult
from timepredictor.utils.logger import logging


def predict_from_history(
    content_type: ContentType,
    duration_seconds: Optional[float] = None,
    character_count: Optional[int] = None,
    transcription_model: str = "whisper-1",
    summary_model: str = "gpt-4o-mini",
    language: str = "original",
) -> PredictionResult:
    """
    Predict processing time for a job using the stored job history.

    Args:
        content_type: Kind of content to process
        duration_seconds: Media duration for youtube/audio/video content
        character_count: Extracted text length for pdf content
        transcription_model: Transcription model identifier
        summary_model: Summary model identifier
        language: Output language

    Returns:
        PredictionResult
    """
    init_db()
    db = SessionLocal()
    try:
        records = load_historical_records(db)
    finally:
        db.close()

    logging.info(f"Building predictor from {len(records)} historical records")
    predictor = create_time_predictor(records)
    return predictor.predict(PredictionInput(
        content_type=content_type,
        duration_seconds=duration_seconds,
        character_count=character_count,
        transcription_model=transcription_model,
        summary_model=summary_model,
        language=language,
    ))


def main():
    """Main function to run the predictor from command line."""
    parser = argparse.ArgumentParser(description="Processing Time Predictor")
    parser.add_argument("content_type", choices=[c.value for c in ContentType],
                        help="Type of content to process")
    parser.add_argument("--duration", type=float, help="Media duration in seconds")
    parser.add_argument("--chars", type=int, help="Text length in characters (pdf)")
    parser.add_argument("--transcription-model", default="whisper-1",
                        help="Transcription model identifier")
    parser.add_argument("--summary-model", default="gpt-4o-mini",
                        help="Summary model identifier")
    parser.add_argument("--language", default="original", help="Output language")

    args = parser.parse_args()

    # Load environment variables
    load_dotenv()

    result = predict_from_history(
        content_type=ContentType(args.content_type),
        duration_seconds=args.duration,
        character_count=args.chars,
        transcription_model=args.transcription_model,
        summary_model=args.summary_model,
        language=args.language,
    )

    print("\n" + "=" * 60)
    print(f"Estimated processing time: {result.formatted_total}")
    print("=" * 60)
    print(f"Transcription: {result.transcription_seconds}s ({result.transcription_rate_display})")
    print(f"Summary:       {result.summary_seconds}s ({result.summary_rate_display})")
    print(f"Based on:      {result.based_on.value} "
          f"(confidence {result.confidence:.2f}, {result.sample_size} samples)")
    print("=" * 60)


if __name__ == "__main__":
    main()
