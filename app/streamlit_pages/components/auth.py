import streamlit as st
import requests
from typing import Optional

API_BASE_URL = "http://localhost:8000/api"


class AuthComponent:
    def __init__(self, api_base_url: str = API_BASE_URL):
        self.api_base_url = api_base_url

    def login(self, username: str, password: str) -> bool:
        """Login user and store the token pair in session state"""
        try:
            response = requests.post(
                f"{self.api_base_url}/auth/login",
                json={"username": username, "password": password},
                timeout=10,
            )
        except requests.RequestException as e:
            st.error(f"Login error: {str(e)}")
            return False

        if response.status_code != 200:
            return False

        data = response.json()
        st.session_state["access_token"] = data["access_token"]
        st.session_state["refresh_token"] = data["refresh_token"]
        st.session_state["user_authenticated"] = True
        return True

    def refresh(self) -> bool:
        """Swap the refresh token for a new pair"""
        refresh_token = st.session_state.get("refresh_token")
        if not refresh_token:
            return False
        try:
            response = requests.post(
                f"{self.api_base_url}/auth/refresh",
                json={"refresh_token": refresh_token},
                timeout=10,
            )
        except requests.RequestException:
            return False

        if response.status_code != 200:
            return False
        data = response.json()
        st.session_state["access_token"] = data["access_token"]
        st.session_state["refresh_token"] = data["refresh_token"]
        return True

    def logout(self):
        """Revoke the session and clear session state"""
        refresh_token = st.session_state.get("refresh_token")
        if refresh_token:
            try:
                requests.post(
                    f"{self.api_base_url}/auth/logout",
                    json={"refresh_token": refresh_token},
                    timeout=5,
                )
            except requests.RequestException as e:
                st.warning(f"Could not revoke the session: {e}")
        for key in ("access_token", "refresh_token", "user_authenticated", "user_info"):
            st.session_state.pop(key, None)

    def is_authenticated(self) -> bool:
        return st.session_state.get("user_authenticated", False)

    def get_token(self) -> Optional[str]:
        return st.session_state.get("access_token")

    def get_user_info(self) -> Optional[dict]:
        """Get current user info, refreshing the access token once if it expired"""
        if not self.is_authenticated():
            return None

        if "user_info" in st.session_state:
            return st.session_state["user_info"]

        try:
            response = requests.get(
                f"{self.api_base_url}/auth/me", headers=self.get_headers(), timeout=10
            )
            if response.status_code == 401 and self.refresh():
                response = requests.get(
                    f"{self.api_base_url}/auth/me", headers=self.get_headers(), timeout=10
                )
        except requests.RequestException:
            return None

        if response.status_code == 200:
            user_info = response.json()
            st.session_state["user_info"] = user_info
            return user_info

        self.logout()
        return None

    def can_write(self) -> bool:
        user_info = self.get_user_info()
        return bool(user_info) and user_info.get("role") in ("staff", "admin")

    def render_login_form(self):
        st.header("🔐 Login")

        with st.form("login_form"):
            username = st.text_input("Username")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Login")

            if submitted:
                if username and password:
                    if self.login(username, password):
                        st.success("Login successful!")
                        st.rerun()
                    else:
                        st.error("Invalid username or password")
                else:
                    st.error("Please enter both username and password")

    def render_user_info(self):
        """Render user info and logout button in sidebar"""
        user_info = self.get_user_info()
        if user_info:
            st.sidebar.write(f"👤 Logged in as: **{user_info['username']}**")
            st.sidebar.write(f"🏷️ Role: **{user_info['role']}**")

            if st.sidebar.button("Logout"):
                self.logout()
                st.rerun()

    def get_headers(self) -> dict:
        token = self.get_token()
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}


# Global auth instance
auth = AuthComponent()
