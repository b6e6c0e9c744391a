"""
QA Lab - Mirror Mode - Main Streamlit UI

Compares the words in a reference image against a candidate image.

Features:
- Reference and candidate image upload with previews
- Grayscale preprocessing and Tesseract OCR
- Word table showing which side each word appears on
- Summary counts
- Excel export of the comparison
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import pandas as pd
import streamlit as st
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

# Add project directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mirror_mode.compare.pipeline import ComparisonPipeline
from mirror_mode.config import get_config, validate_system_requirements
from mirror_mode.errors import DecodeError, ExtractionError
from mirror_mode.export.excel import ComparisonExporter
from mirror_mode.models import ComparisonResult, PipelineResult
from mirror_mode.ocr.extractor import OCRExtractor

# Configure logging
logging.basicConfig(
    level=getattr(logging, get_config().log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

IMAGE_TYPES = ["png", "jpg", "jpeg", "jpe", "jfif", "tiff", "tif", "bmp", "gif", "webp"]

LANGUAGE_NAMES = {
    "spa": "Spanish",
    "eng": "English",
    "por": "Portuguese",
    "fra": "French",
    "deu": "German",
    "ita": "Italian",
}


def init_session_state():
    """Initialize Streamlit session state."""
    defaults = {
        "config": get_config(),
        "reference_image": None,
        "candidate_image": None,
        "pipeline_result": None,
        "system_validated": False,
        "validation_results": None,
        "uploader_generation": 0,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def validate_system():
    """Validate system requirements once per session."""
    if not st.session_state.system_validated:
        with st.spinner("Checking system requirements..."):
            st.session_state.validation_results = validate_system_requirements()
            st.session_state.system_validated = True

    results = st.session_state.validation_results
    if not results["tesseract"]["installed"]:
        st.error(
            "⚠️ **Tesseract not found!** OCR will not work.\n\n"
            f"{results['tesseract']['message']}"
        )
    elif not results["language"]["installed"]:
        st.warning(
            f"⚠️ Tesseract language pack `{results['language']['configured']}` "
            "is not installed. Recognition may fail."
        )


def render_sidebar():
    """Render the settings sidebar."""
    config = st.session_state.config

    with st.sidebar:
        st.header("⚙️ Settings")

        st.subheader("OCR Settings")

        installed = (st.session_state.validation_results or {}).get("tesseract", {}).get("languages", [])
        options = sorted(set(LANGUAGE_NAMES) | set(installed) | {config.language})
        st.selectbox(
            "Recognition Language",
            options=options,
            index=options.index(config.language),
            format_func=lambda code: f"{LANGUAGE_NAMES.get(code, code)} ({code})",
            key="ocr_language",
        )

        st.checkbox(
            "Read both images at once",
            value=config.concurrent_extraction,
            key="concurrent_extraction",
            help="Run OCR on the reference and candidate images in parallel",
        )

        st.divider()

        st.subheader("System Status")

        if st.button("🔄 Refresh Status"):
            st.session_state.system_validated = False
            st.rerun()

        tesseract = (st.session_state.validation_results or {}).get("tesseract", {})
        if tesseract.get("installed"):
            st.success(f"✅ {tesseract.get('message')}")
        else:
            st.error("❌ Tesseract not found")


def read_upload(label: str, key: str) -> Optional[bytes]:
    """Render an uploader and return its content if the file is acceptable."""
    uploaded_file = st.file_uploader(
        label,
        type=IMAGE_TYPES,
        key=f"{key}_{st.session_state.uploader_generation}",
    )
    if not uploaded_file:
        return None

    content = uploaded_file.getvalue()
    max_size = st.session_state.config.max_file_size_bytes
    if len(content) > max_size:
        st.error(
            f"{uploaded_file.name} is larger than "
            f"{st.session_state.config.max_file_size_mb} MB"
        )
        return None

    st.image(content, caption=uploaded_file.name, use_container_width=True)
    return content


def render_upload_section():
    """Render the two image upload areas side by side."""
    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Reference image")
        st.session_state.reference_image = read_upload("Choose the reference image", "reference")

    with col2:
        st.subheader("Candidate image")
        st.session_state.candidate_image = read_upload("Choose the candidate image", "candidate")


def run_comparison() -> Optional[PipelineResult]:
    """Run the pipeline on the uploaded images, retrying OCR failures if configured."""
    config = st.session_state.config
    extractor = OCRExtractor(language=st.session_state.get("ocr_language", config.language))
    pipeline = ComparisonPipeline(
        extractor=extractor,
        concurrent=st.session_state.get("concurrent_extraction", config.concurrent_extraction),
    )

    retrying = Retrying(
        stop=stop_after_attempt(max(1, config.ocr_max_attempts)),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        retry=retry_if_exception_type(ExtractionError),
        reraise=True,
    )

    try:
        with st.spinner("🔍 Scanning images..."):
            return retrying(
                pipeline.compare_images,
                st.session_state.reference_image,
                st.session_state.candidate_image,
            )
    except DecodeError as e:
        st.error(f"One of the images could not be read. Please choose another file.\n\n{e}")
        logger.warning(f"Rejected image: {e}")
    except ExtractionError as e:
        st.error(f"An error occurred while processing the images. Please try again.\n\n{e}")
    return None


def render_actions():
    """Render the Compare and Reset buttons."""
    both_chosen = (
        st.session_state.reference_image is not None
        and st.session_state.candidate_image is not None
    )

    col1, col2, _ = st.columns([1, 1, 4])

    with col1:
        if st.button("Compare", type="primary", disabled=not both_chosen, use_container_width=True):
            st.session_state.pipeline_result = run_comparison()

    with col2:
        if st.button("Reset", disabled=not both_chosen, use_container_width=True):
            st.session_state.pipeline_result = None
            st.session_state.reference_image = None
            st.session_state.candidate_image = None
            # New uploader keys clear the chosen files
            st.session_state.uploader_generation += 1
            st.rerun()


def render_summary(result: ComparisonResult):
    """Render the three count cards."""
    col1, col2, col3 = st.columns(3)
    col1.metric("Total distinct words", result.total_distinct_words)
    col2.metric("Words in reference image", result.reference_word_count)
    col3.metric("Words in candidate image", result.candidate_word_count)


def comparison_dataframe(result: ComparisonResult) -> pd.DataFrame:
    """Build the display table for a comparison."""
    return pd.DataFrame(
        [
            {
                "Word": row.word,
                "Reference image": "✅" if row.in_reference else "❌",
                "Candidate image": "✅" if row.in_candidate else "❌",
            }
            for row in result.rows
        ],
        columns=["Word", "Reference image", "Candidate image"],
    )


def render_results_section():
    """Render counts, the word table and the export button."""
    pipeline_result: Optional[PipelineResult] = st.session_state.pipeline_result
    if pipeline_result is None:
        render_summary(ComparisonResult())
        return

    result = pipeline_result.comparison
    render_summary(result)

    st.caption(
        f"Processed in {pipeline_result.processing_time_seconds:.2f}s · "
        f"{result.common_word_count} words in common"
    )

    for label, extracted in (("reference", pipeline_result.reference), ("candidate", pipeline_result.candidate)):
        if extracted.has_input and not extracted.text:
            st.warning(f"No text was recognized in the {label} image.")

    if result.rows:
        st.dataframe(comparison_dataframe(result), use_container_width=True, height=500, hide_index=True)

        st.download_button(
            "⬇️ Download Excel File",
            data=ComparisonExporter().to_bytes(result),
            file_name="comparison.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

    with st.expander("Recognized text"):
        col1, col2 = st.columns(2)
        col1.text_area("Reference", pipeline_result.reference.text, height=200, disabled=True)
        col2.text_area("Candidate", pipeline_result.candidate.text, height=200, disabled=True)


def main():
    """Main application entry point."""
    st.set_page_config(
        page_title="QA Lab - Mirror Mode",
        page_icon="🪞",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    init_session_state()

    st.title("🪞 QA Lab - Mirror Mode")
    st.markdown("Compare the words in a reference image against a candidate image.")

    validate_system()
    render_sidebar()

    st.divider()

    render_upload_section()
    render_actions()

    st.divider()

    render_results_section()


if __name__ == "__main__":
    main()
