#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from vchip.constants import DEFAULT_KEYMAP
from vchip.inputs.i_null import Inputs, InputsError
from vchip.keypad import Keypad
from vchip.renderers.r_null import Renderer, RendererError


class TestInputs(unittest.TestCase):
    def setUp(self):
        self.renderer = Renderer()
        self.inputs = Inputs(DEFAULT_KEYMAP, self.renderer)
        self.keypad = Keypad()

    def test_inputs_keymap(self):
        self.assertEqual(16, len(self.inputs.keymap_dict))
        self.assertEqual(0x0, self.inputs.keymap_dict[120])  # 'x'
        self.assertEqual(0xF, self.inputs.keymap_dict[118])  # 'v'

    def test_inputs_keymap_lowercase(self):
        inputs = Inputs(",".join(str(ord(c)) for c in "X123QWEASDZC4RFV"), self.renderer, force_lowercase=True)
        self.assertEqual(0x0, inputs.keymap_dict[ord("x")])

    def test_inputs_keymap_errors(self):
        self.assertRaises(InputsError, Inputs, "1,2,3", self.renderer)
        self.assertRaises(InputsError, Inputs, ",".join(["a"] * 16), self.renderer)
        self.assertRaises(InputsError, Inputs, ",".join(["1"] * 16), self.renderer)

    def test_inputs_key_down_up(self):
        self.inputs.host_key_down(self.keypad, 120)
        self.assertTrue(self.keypad.is_key_down(0x0))
        self.assertIsNone(self.keypad.get_released())

        self.inputs.host_key_up(self.keypad, 120)
        self.assertFalse(self.keypad.is_key_down(0x0))
        self.assertEqual(0x0, self.keypad.get_released())

        # The next poll starts with a clean set of release signals
        self.assertFalse(self.inputs.process_messages(self.keypad))
        self.assertIsNone(self.keypad.get_released())

    def test_inputs_unmapped_keys_ignored(self):
        self.inputs.host_key_down(self.keypad, 0)
        self.inputs.host_key_up(self.keypad, 0)
        self.assertIsNone(self.keypad.get_released())

    def test_inputs_release_without_press(self):
        self.inputs.host_key_up(self.keypad, 120)
        self.assertIsNone(self.keypad.get_released())

    def test_renderer_scale(self):
        self.assertEqual(1, self.renderer.scale)
        self.assertRaises(RendererError, Renderer, scale=0)
