"""
Utility modules for the Streamlit frontend.

This package contains:
- api_client: Shared backend client and sign-in lookup
- session: Signed-in user stored in session state
- state: Listing controls, fetched views and flash messages in session state
- ui_components: Recipe cards, listing controls, pagination and the account sidebar
"""
