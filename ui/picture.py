"""Picture source page: camera shot or file picker."""
from __future__ import annotations

import streamlit as st

from app_constants import PAGE_HOME
from capabilities import PictureSourceType
from services.container import GeoPictureServices
from session_state import go_page

UPLOAD_KEY = "picture_upload"


def _capture(services: GeoPictureServices) -> None:
    services.pictures.capture(PictureSourceType.CAMERA)


def _pick_file(services: GeoPictureServices) -> None:
    uploaded = st.session_state.get(UPLOAD_KEY)
    if uploaded is None:
        return
    services.pictures.select_file(uploaded.name, uploaded.type or "", uploaded.getvalue)


def render_picture_page(services: GeoPictureServices) -> None:
    st.subheader("Picture")

    if services.camera.poll():
        st.rerun()
    elif not services.camera.pending:
        st.button("📷 Take a picture", width='stretch', on_click=_capture, args=(services,))

    st.file_uploader(
        "…or choose an image file",
        type=["gif", "jpg", "jpeg", "png"],
        key=UPLOAD_KEY,
        on_change=_pick_file,
        args=(services,),
    )

    draft = services.pictures.draft
    if draft.is_empty:
        st.caption("No picture selected yet.")
    else:
        st.image(draft.display, caption=draft.filename, width='stretch')

    if st.button("← Back", width='stretch'):
        go_page(PAGE_HOME)
        st.rerun()


__all__ = ["render_picture_page"]
