# Copyright (C) 2013 XebiaLabs B.V.
#
# Licensed under the Apache License, Version 2.0 (the "License"); you may
# not use this file except in compliance with the License. You may obtain
# a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations
# under the License.

import io
import os

import setuptools

from xlrelease_ci.version import version_string

HERE = os.path.dirname(os.path.abspath(__file__))


def parse_requirements(filename='requirements.txt'):
    with io.open(os.path.join(HERE, filename), encoding='utf-8') as f:
        return [line.strip() for line in f
                if line.strip() and not line.startswith('#')]


requires = parse_requirements()
test_requires = parse_requirements(os.path.join('tools', 'test-requires'))


setuptools.setup(
    name='xlrelease-ci',
    version=version_string,
    author='XebiaLabs B.V.',
    description='Create and start XL Release releases from CI build steps',
    license='Apache License, Version 2.0',
    packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    install_requires=requires,
    extras_require={'test': test_requires},
    python_requires='>=3.6',
    zip_safe=False,
    classifiers=[
        'Environment :: Console',
        'Intended Audience :: Developers',
        'Intended Audience :: Information Technology',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ],
    entry_points={
        'console_scripts': [
            'xlr-notify=xlrelease_ci.cli.entry:main',
        ],
        'xlr.cli.subcommands': [
            'check=xlrelease_ci.cli.subcommand.check:CheckSubCommand',
            'credentials=xlrelease_ci.cli.subcommand.credentials:'
            'CredentialsSubCommand',
            'templates=xlrelease_ci.cli.subcommand.templates:'
            'TemplatesSubCommand',
            'notify=xlrelease_ci.cli.subcommand.notify:NotifySubCommand',
        ],
    },
)
