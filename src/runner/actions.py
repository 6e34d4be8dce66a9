"""
빌드 단계 본문

각 메서드는 Step.action으로 쓰이는 무인자 작업이다.
외부 도구의 non-zero 종료 코드는 StepFailure로 변환한다.
"""
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Sequence

from src.core.config import Config
from src.core.exceptions import StepFailure
from src.core.identifiers import ImageTag
from src.core.logger import get_logger
from src.core.parameters import ParameterSet
from src.runner.process import ProcessInvoker, working_directory


ASSEMBLY_INFO_TEMPLATE = """<Project>
    <!-- This file is generated by the build script. -->
    <PropertyGroup>
        <Product>{product}</Product>
        <Authors>{maintainers}</Authors>
        <Company>{maintainers}</Company>
        <Copyright>Copyright © {year} {copyright_holder}</Copyright>
        <VersionPrefix>{version}</VersionPrefix>
        <VersionSuffix></VersionSuffix>
    </PropertyGroup>
</Project>
"""


@dataclass(frozen=True)
class ProjectLayout:
    """빌드 대상 저장소의 경로/메타데이터"""
    root: Path
    solution_root: Path
    solution: Path
    application_root: Path
    project_name: str
    product: str
    maintainers: str
    copyright_holder: str
    docker_context: Path
    image_tag: ImageTag
    docker_ports: str
    unit_test_pattern: str
    e2e_test_pattern: str

    @classmethod
    def from_config(cls, config: Config) -> "ProjectLayout":
        project = config.get_section("project")
        docker = config.get_section("docker")
        tests = config.get_section("tests")

        root = Path(project.get("root", ".")).resolve()
        solution_root = root / project.get("solution_root", "src")
        return cls(
            root=root,
            solution_root=solution_root,
            solution=solution_root / config.get_required("project.solution"),
            application_root=root / project.get("application_root", "src"),
            project_name=config.get_required("project.project_name"),
            product=project.get("product", ""),
            maintainers=project.get("maintainers", ""),
            copyright_holder=project.get("copyright_holder", ""),
            docker_context=root / docker.get("context", "."),
            image_tag=ImageTag.compose(
                docker.get("image_namespace", "local"),
                config.get_required("docker.image_name"),
            ),
            docker_ports=str(docker.get("ports", "8080:8080")),
            unit_test_pattern=tests.get("unit_pattern", "*.Tests.Unit"),
            e2e_test_pattern=tests.get("e2e_pattern", "*.Tests.E2E"),
        )

    @property
    def project_dir(self) -> Path:
        return self.application_root / self.project_name

    @property
    def publish_dir(self) -> Path:
        return self.project_dir / "publish"

    @property
    def assembly_info_path(self) -> Path:
        return self.solution_root / "Directory.Build.props"


class BuildActions:
    """
    빌드/테스트/게시/컨테이너 작업 모음

    사용법:
        actions = BuildActions(params, invoker, ProjectLayout.from_config(config))
        actions.clean()
        actions.compile()
    """

    def __init__(self, params: ParameterSet, invoker: ProcessInvoker, layout: ProjectLayout):
        self.logger = get_logger(self.__class__.__name__)
        self.params = params
        self.invoker = invoker
        self.layout = layout

    @property
    def configuration(self) -> str:
        return self.params.configuration.value

    def _execute(self, argv: Sequence[str], cwd: Path | None = None) -> int:
        """프로세스 실행, non-zero면 StepFailure"""
        exit_code = self.invoker.run(argv, cwd=cwd, timeout=self.params.timeout)
        if exit_code != 0:
            raise StepFailure(
                f"'{' '.join(str(a) for a in argv)}' exited with code {exit_code}",
                exit_code=exit_code,
            )
        return exit_code

    # ========== dotnet ==========

    def clean(self) -> int:
        return self._execute([
            "dotnet", "clean", self.layout.solution,
            "-c", self.configuration, "--nologo", "-v", "minimal",
        ])

    def restore(self) -> int:
        return self._execute(["dotnet", "restore", self.layout.solution])

    def compile(self) -> int:
        return self._execute([
            "dotnet", "build", self.layout.solution,
            "-c", self.configuration, "--nologo", "--no-restore",
        ])

    def publish(self) -> int:
        return self._execute([
            "dotnet", "publish", self.layout.project_dir,
            "-c", self.configuration, "-o", self.layout.publish_dir, "--nologo",
        ])

    def stamp_assembly_info(self) -> None:
        """Directory.Build.props 재생성 (버전/제품 정보)"""
        path = self.layout.assembly_info_path
        content = ASSEMBLY_INFO_TEMPLATE.format(
            product=self.layout.product,
            maintainers=self.layout.maintainers,
            year=datetime.now().year,
            copyright_holder=self.layout.copyright_holder,
            version=self.params.version,
        )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise StepFailure(f"cannot write {path}: {e}") from e
        self.logger.info(f"어셈블리 정보 기록: {path} (version={self.params.version})")

    # ========== tests ==========

    def find_test_assemblies(self, pattern: str) -> list[Path]:
        """<solution_root>/*/<pattern>/bin/<cfg>/ 아래 <pattern>.dll 검색"""
        glob = f"*/{pattern}/bin/{self.configuration}/**/{pattern}.dll"
        return sorted(self.layout.solution_root.glob(glob))

    def run_tests(self, pattern: str) -> None:
        assemblies = self.find_test_assemblies(pattern)
        if not assemblies:
            self.logger.warning(
                f"테스트 어셈블리 없음: {self.layout.solution_root}/*/{pattern}/bin/{self.configuration}/"
            )
            return

        for assembly in assemblies:
            self.logger.info(f"Executing: dotnet test {assembly}")
            self._execute([
                "dotnet", "test", assembly,
                "--logger", f"trx;LogFileName={assembly.name}.trx", "--nologo",
            ])

    def unit_tests(self) -> None:
        self.run_tests(self.layout.unit_test_pattern)

    def e2e_tests(self) -> None:
        self.run_tests(self.layout.e2e_test_pattern)

    # ========== docker ==========

    def docker_build(self) -> int:
        with working_directory(self.layout.docker_context):
            return self._execute(["docker", "build", "-t", self.layout.image_tag.value, "."])

    def docker_run(self) -> int:
        return self._execute([
            "docker", "run", "--rm", "-p", self.layout.docker_ports, "-d",
            self.layout.image_tag.value,
        ])
