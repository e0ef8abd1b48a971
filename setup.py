"""
SPDX-License-Identifier: Apache-2.0
"""

import setuptools

if __name__ == "__main__":
    setuptools.setup(
        name="debinstall",
        version="0.1.0",
        description="Install local Debian packages through aptdaemon after polkit authorization",
        license="Apache-2.0",
        python_requires=">=3.9",
        packages=setuptools.find_packages(include=["debinstall", "debinstall.*"]),
        install_requires=["dbus-fast"],
        extras_require={"test": ["pytest"]},
        data_files=[("share/debinstall/config", ["config/installer.conf", "config/logging.conf"])],
        entry_points={"console_scripts": ["debinstall = debinstall.cmd.install:main"]},
    )
