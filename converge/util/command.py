### Copyright 2014, MTA SZTAKI, www.sztaki.hu
###
### Licensed under the Apache License, Version 2.0 (the "License");
### you may not use this file except in compliance with the License.
### You may obtain a copy of the License at
###
###    http://www.apache.org/licenses/LICENSE-2.0
###
### Unless required by applicable law or agreed to in writing, software
### distributed under the License is distributed on an "AS IS" BASIS,
### WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
### See the License for the specific language governing permissions and
### limitations under the License.

""" Execution of external commands

The resolver queries the service manager through this module. Commands are
run synchronously, but can be aborted by a timeout or through a
:class:`threading.Event`; in both cases the child process is terminated
before the call returns.
"""

__all__ = ['CommandResult', 'CommandError', 'CommandTimeout',
           'CommandCancelled', 'run_command']

import collections
import logging
import subprocess
import time

log = logging.getLogger('converge.util.command')
datalog = logging.getLogger('converge.data.util.command')

POLL_INTERVAL = 0.05

CommandResult = collections.namedtuple(
    'CommandResult', ['exitstatus', 'stdout', 'stderr'])

class CommandError(Exception):
    """The command could not be performed."""
    def __init__(self, argv, reason):
        self.argv = list(argv)
        self.reason = reason
        super(CommandError, self).__init__(argv, reason)

    def __str__(self):
        return '{0}: {1}'.format(' '.join(self.argv), self.reason)

class CommandTimeout(CommandError):
    """The command has not finished in time and has been killed."""
    def __init__(self, argv, timeout):
        self.timeout = timeout
        super(CommandTimeout, self).__init__(
            argv, 'timed out after {0} seconds'.format(timeout))

class CommandCancelled(CommandError):
    """The command has been aborted through its cancel event."""
    def __init__(self, argv):
        super(CommandCancelled, self).__init__(argv, 'cancelled')

def _kill(proc):
    proc.kill()
    proc.communicate()

def run_command(argv, timeout=None, cancel_event=None):
    """
    Run a command and collect its output.

    :param list argv: The command line; no shell is involved.
    :param timeout: Seconds to wait for the command. If :data:`None` or 0,
        there will be no timeout.
    :param cancel_event: The command will be killed when this event is set.
    :type cancel_event: :class:`threading.Event`

    :rtype: :class:`CommandResult`
    :raise CommandError: if the command cannot be started.
    :raise CommandTimeout: if the command does not finish in time.
    :raise CommandCancelled: if ``cancel_event`` is set meanwhile.
    """
    log.debug('Running %r (timeout: %r)', argv, timeout)
    if cancel_event is not None and cancel_event.is_set():
        raise CommandCancelled(argv)

    try:
        proc = subprocess.Popen(argv,
                                stdin=subprocess.DEVNULL,
                                stdout=subprocess.PIPE,
                                stderr=subprocess.PIPE,
                                universal_newlines=True)
    except OSError as ex:
        raise CommandError(argv, ex)

    if cancel_event is None:
        try:
            stdout, stderr = proc.communicate(timeout=timeout or None)
        except subprocess.TimeoutExpired:
            _kill(proc)
            raise CommandTimeout(argv, timeout)
    else:
        # communicate() cannot be interrupted; poll in short slices so the
        # cancel event is noticed promptly.
        deadline = time.time() + timeout if timeout else None
        while True:
            try:
                stdout, stderr = proc.communicate(timeout=POLL_INTERVAL)
                break
            except subprocess.TimeoutExpired:
                pass
            if cancel_event.is_set():
                log.debug('Cancelling %r', argv)
                _kill(proc)
                raise CommandCancelled(argv)
            if deadline is not None and time.time() > deadline:
                _kill(proc)
                raise CommandTimeout(argv, timeout)

    log.debug('%r exited with status %d', argv, proc.returncode)
    datalog.debug('Output of %r:\n%s', argv, stdout)
    return CommandResult(proc.returncode, stdout, stderr)
