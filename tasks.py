from invoke import task

PACKAGE_DIR = "keydash"
TESTS_DIR = "tests"


@task
def dependency_check(ctx):
    ctx.run("safety check --full-report")


@task
def lint(ctx):
    ctx.run(f"black --check {PACKAGE_DIR} {TESTS_DIR}")
    ctx.run(f"pylint {PACKAGE_DIR}")
    ctx.run(f"mypy {PACKAGE_DIR}")


@task
def unit_test(ctx):
    ctx.run(f"pytest -v {TESTS_DIR}/unit")


@task
def serve(ctx, port=7999, reload=False):
    reload_flag = "--reload" if reload else ""
    ctx.run(f"keydash public-api --port {port} {reload_flag}")
