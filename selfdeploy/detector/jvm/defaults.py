"""Default commands for JVM project types, keyed by build tool."""

BUILD_CMDS: dict[str, str] = {
    "maven": "mvn package -DskipTests",
    "gradle": "gradle assemble",
    "ant": "ant",
}

TEST_CMDS: dict[str, str] = {
    "maven": "mvn test",
    "gradle": "gradle test",
    "ant": "ant test",
}

# Wrapper scripts that replace the bare tool name when present in the module
WRAPPERS: dict[str, tuple[str, str]] = {
    "maven": ("mvnw", "mvn"),
    "gradle": ("gradlew", "gradle"),
}

SPRING_BOOT_MARKER = "spring-boot"
SPRING_BOOT_ANNOTATION = "@SpringBootApplication"
