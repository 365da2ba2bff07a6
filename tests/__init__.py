import os
import tempfile

# Keep log files and saved configs from the test run out of the real user data folder.
os.environ.setdefault("COUNTDOWN_HOME", tempfile.mkdtemp(prefix="countdown-tests-"))
