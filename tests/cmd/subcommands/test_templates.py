import yaml

from tests import base
from tests.cmd.test_cmd import CmdTestsBase

_templates = [
    {'id': 'Release1', 'title': 'Release A'},
    {'id': 'Release2', 'title': 'Other'},
    {'id': 'Release3', 'title': 'Bug Release', 'status': 'TEMPLATE'},
]


class TemplatesTests(CmdTestsBase):

    def setUp(self):
        super(TemplatesTests, self).setUp()
        self.request_mock.return_value = base.make_response(200, _templates)

    def test_list_matching_templates(self):
        output = self.execute_and_capture(
            ['--conf', self.default_config_file, 'templates', 'Rel'])

        self.assertEqual('Release1\tRelease A\nRelease3\tBug Release\n',
                         output)
        self.assertIn('Matching templates: 2', self.logger.output)

    def test_list_all_templates(self):
        output = self.execute_and_capture(
            ['--conf', self.default_config_file, 'templates'])
        self.assertEqual(3, len(output.splitlines()))

    def test_credential_option(self):
        self.execute_and_capture(
            ['--conf', self.default_config_file, 'templates',
             '-c', 'deployer', 'Rel'])

        self.assertEqual('https://other.example.com/releases/templates',
                         self.request_mock.call_args[0][1])

    def test_yaml_output(self):
        output = self.execute_and_capture(
            ['--conf', self.default_config_file, 'templates', '--yaml',
             'Bug'])

        self.assertEqual([{'id': 'Release3', 'title': 'Bug Release',
                           'status': 'TEMPLATE'}],
                         yaml.safe_load(output))
