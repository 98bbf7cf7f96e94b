import streamlit as st

from lungscan.config import load_frontend_config
from lungscan.frontend.controller import SelectedFile, UploadPredictController
from lungscan.frontend.view import PLACEHOLDER, probability_table, project
from lungscan.frontend.widgets import UPLOAD_KEY, TransitionRedraw, draw_picker, draw_submit
from lungscan.logging import init_logging

config = load_frontend_config()
init_logging(config['log_level'])

st.set_page_config(page_title="Lung Cancer CT Scan Analysis", layout="wide")

# One controller per browser session
if 'controller' not in st.session_state:
    st.session_state.controller = UploadPredictController(
        config['predict_url'],
        timeout=config['request_timeout'],
    )
controller = st.session_state.controller


def on_file_change():
    upload = st.session_state.get(UPLOAD_KEY)
    candidate = SelectedFile.from_upload(upload) if upload is not None else None
    controller.select_file(candidate)


st.markdown("""
<style>
    .ct-preview {
        width: 100%;
        height: 16rem;
        object-fit: cover;
        border-radius: 0.5rem;
        border: 1px solid #e5e7eb;
    }
</style>
""", unsafe_allow_html=True)

view = project(controller.state)

# Header
st.title("Lung Cancer CT Scan Analysis")
st.markdown("""
Upload CT scan images for instant analysis. Our advanced AI model helps detect potential lung abnormalities,
supporting early diagnosis and treatment planning.
""")

col_upload, col_results = st.columns(2)

with col_upload:
    st.subheader("Upload CT Scan")
    picker_slot = st.empty()
    draw_picker(picker_slot, view, on_change=on_file_change)
    if view.selected_name:
        st.caption(f"Selected: {view.selected_name}")

    button_slot = st.empty()
    clicked = draw_submit(button_slot, view)

    if view.error:
        st.error(view.error)

with col_results:
    st.subheader("Preview & Results")

    if view.preview_url:
        st.markdown(
            f'<img src="{view.preview_url}" alt="CT Scan Preview" class="ct-preview"/>',
            unsafe_allow_html=True,
        )

    if view.result:
        result = view.result
        with st.container(border=True):
            st.success("**Analysis Complete**")
            st.markdown(f"**Prediction:** {result.label}")
            if result.confidence is not None:
                st.metric("Confidence", f"{result.confidence:.1%}")
            st.caption(f"Analyzed file: {result.filename}")
            if result.probabilities:
                st.dataframe(probability_table(result.probabilities), hide_index=True)
            st.caption(result.disclaimer)

    if view.show_placeholder:
        st.info(PLACEHOLDER)

st.markdown("---")

# Information section
col1, col2, col3 = st.columns(3)
with col1:
    st.markdown("**About the Analysis**")
    st.caption(
        "Our AI model analyzes CT scan images to detect potential indicators "
        "of lung cancer and other respiratory conditions."
    )
with col2:
    st.markdown("**Supported File Types**")
    st.caption("Common image formats such as JPEG and PNG exports of CT scans.")
with col3:
    st.markdown("**Important Note**")
    st.caption(
        "This tool is for preliminary analysis only. Always consult with "
        "healthcare professionals for medical diagnosis."
    )


if clicked:
    with st.spinner("Analyzing CT scan..."):
        controller.submit(on_transition=TransitionRedraw(picker_slot, button_slot))
    st.rerun()
