"""Home screen: the post form."""
from __future__ import annotations

import streamlit as st

from app_constants import PAGE_LOCATION, PAGE_OPTIONS, PAGE_PICTURE
from services.container import GeoPictureServices
from session_state import go_page


def _submit(services: GeoPictureServices) -> None:
    services.submission.submit(st.session_state)


def render_home_screen(services: GeoPictureServices) -> None:
    session_client = services.session_client
    user = session_client.current_user
    if session_client.is_authenticated():
        st.caption(f"Posting as **{user.name}**.")
    else:
        st.caption("Log in from the options page to post pictures.")

    draft = services.pictures.draft
    if draft.is_empty:
        st.info("No picture selected yet.")
    else:
        st.image(draft.display, width='stretch')
    if st.button("📷 Picture", width='stretch'):
        go_page(PAGE_PICTURE)
        st.rerun()

    summary = services.location.summary()
    st.markdown(f"📍 {summary}")
    if st.button("Edit location", width='stretch'):
        go_page(PAGE_LOCATION)
        st.rerun()

    st.text_input("Title", key="title")
    st.text_area("Body", key="body")

    c1, c2 = st.columns(2)
    with c1:
        st.button(
            "Post",
            type="primary",
            width='stretch',
            disabled=services.submission.busy,
            on_click=_submit,
            args=(services,),
        )
    with c2:
        if st.button("⚙️ Options", width='stretch'):
            go_page(PAGE_OPTIONS)
            st.rerun()


__all__ = ["render_home_screen"]
