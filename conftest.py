def pytest_addoption(parser):
    parser.addoption("--runslow", default=None, action="store_true", help="run slow tests")
    parser.addoption(
        "--partitions",
        action="store",
        default=None,
        type=int,
        help="default number of partitions for local collections",
    )
    parser.addoption("--randomly", action="store_true", help="run random test config")
