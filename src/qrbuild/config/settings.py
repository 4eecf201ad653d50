# config/settings.py
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class ArtifactSpec(BaseModel):
    """An output file the build must produce."""
    label: str
    path: Path


class Settings(BaseSettings):
    """Build orchestrator settings."""
    # Project Paths
    project_dir: Path = Field(default=Path("."))
    gradle_wrapper: str = Field(default="./gradlew")
    java_command: str = Field(default="java")
    build_log_dir: Path = Field(default=Path(".build-logs"))

    # Gradle modules
    sdk_module: str = Field(default="qrcode-sdk")
    app_module: str = Field(default="app")

    # Task names
    lint_task: str = Field(default="lint")
    docs_task: str = Field(default="dokka")
    integration_test_task: str = Field(default="connectedAndroidTest")
    publish_task: str = Field(default="publishReleasePublicationToMavenRepository")

    # Build outputs
    artifacts: List[ArtifactSpec] = Field(
        default_factory=lambda: [
            ArtifactSpec(
                label="Debug APK",
                path=Path("app/build/outputs/apk/debug/app-debug.apk")
            ),
            ArtifactSpec(
                label="Release APK",
                path=Path("app/build/outputs/apk/release/app-release.apk")
            ),
            ArtifactSpec(
                label="SDK AAR",
                path=Path("qrcode-sdk/build/outputs/aar/qrcode-sdk-release.aar")
            ),
        ]
    )
    test_reports: Dict[str, Path] = Field(
        default_factory=lambda: {
            "SDK tests": Path("qrcode-sdk/build/reports/tests/testDebugUnitTest"),
            "App tests": Path("app/build/reports/tests/testDebugUnitTest"),
        }
    )
    integration_test_dir: Path = Field(default=Path("app/src/androidTest"))

    # Fresh build
    kill_patterns: List[str] = Field(default_factory=lambda: ["java", "gradle"])

    # Process Configuration
    step_timeout: Optional[int] = Field(default=None)  # seconds, None waits forever
    kill_timeout: int = Field(default=5)  # seconds

    class Config:
        env_file = ".env"
        env_prefix = "QRBUILD_"

    def resolve(self, path: Path) -> Path:
        """Resolve a project-relative path."""
        if path.is_absolute():
            return path
        return self.project_dir / path

    @property
    def wrapper_path(self) -> Path:
        return self.resolve(Path(self.gradle_wrapper))

    def module_task(self, module: str, task: str) -> str:
        """Qualified Gradle task path, e.g. ':app:testDebugUnitTest'."""
        return f":{module}:{task}"
