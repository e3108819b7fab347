"""Shared test helpers: sample PHP sources and method/provider factories."""

from unittest.mock import MagicMock

from docsync.models import Method, Visibility

SAMPLE_PHP = """\
<?php

class UserService
{
    /**
     * Old docs.
     */
    public function getUser($id)
    {
        return $this->repo->find($id);
    }

    protected function save(User $user, bool $flush = true)
    {
        $this->repo->persist($user);
    }

    private static function normalize(string $name): string
    {
        return trim($name);
    }

    function legacy()
    {
        return null;
    }
}
"""

SMALL_PHP = """\
<?php
class A
{
    public function one()
    {
        return 1;
    }

    public function two()
    {
        return 2;
    }
}
"""

NESTED_PHP = """\
<?php
class Checker
{
    public function check($x)
    {
        if ($x) {
            return 1;
        }
        return 0;
    }
}
"""

INTERFACE_PHP = """\
<?php
interface Repo
{
    public function find($id);
    public function all();
}
"""


def make_method(
    name: str = "run",
    start: int = 0,
    annotation: str | None = None,
    docblock: str | None = None,
    parameters: str = "",
) -> Method:
    return Method(
        visibility=Visibility.PUBLIC,
        name=name,
        parameters=parameters,
        body="",
        start_position=start,
        end_position=start,
        docblock=docblock,
        annotation=annotation,
    )


def make_mock_provider(*responses) -> MagicMock:
    """Provider whose generate() yields each response in turn (exceptions are raised)."""
    provider = MagicMock()
    if len(responses) == 1 and not isinstance(responses[0], BaseException):
        provider.generate = MagicMock(return_value=responses[0])
    else:
        provider.generate = MagicMock(side_effect=list(responses))
    return provider


class SleepRecorder:
    """Stands in for time.sleep and remembers every delay."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
