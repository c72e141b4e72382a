"""
Unit tests for the IP.BIN decoder and the CRC-16 routine.
"""

from datetime import date

import pytest

from gdrom.checksums import CRC16Context
from gdrom.errors import IPBinFormatError, IPBinLengthError
from gdrom.ipbin import IPBIN_FIELDS, IPBIN_LENGTH, LAST_SECTOR, IPBin, Peripheral, Region
from tests.conftest import make_ip_bin


class TestCRC16:
    """Test the CRC-16 used by the device information field."""

    def test_check_value(self):
        assert CRC16Context.calculate(b'123456789') == 0x29B1

    def test_empty_input_returns_seed(self):
        assert CRC16Context.calculate(b'') == 0xFFFF

    def test_data_helper(self):
        text, raw = CRC16Context.data(b'123456789xyz', 9)
        assert text == '29B1'
        assert raw == b'\x29\xb1'


class TestRegion:
    """Test the area symbol checks."""

    def test_all_regions(self):
        region = Region(b'JUE')
        assert region.is_japan()
        assert region.is_usa()
        assert region.is_europe()

    def test_japan_only(self):
        region = Region(b'J  ')
        assert region.is_japan()
        assert not region.is_usa()
        assert not region.is_europe()

    def test_letters_must_be_in_their_slot(self):
        region = Region(b'EJU')
        assert not region.is_japan()
        assert not region.is_usa()
        assert not region.is_europe()

    def test_str(self):
        assert str(Region(b'JUE     ')) == 'JUE     '


class TestPeripheral:
    def test_is_set(self):
        assert Peripheral.VGA_BOX.is_set(0x10)
        assert not Peripheral.WINDOWS_CE.is_set(0x10)
        assert Peripheral.MOUSE == 1 << 27


class TestIPBinDecode:
    """Test decoding a complete IP.BIN block."""

    @pytest.mark.parametrize('length', [0, IPBIN_LENGTH - 1, IPBIN_LENGTH + 1])
    def test_wrong_length(self, length):
        with pytest.raises(IPBinLengthError):
            IPBin.decode(bytes(length))

    def test_fields(self, ip_bin_bytes):
        ip_bin = IPBin.decode(ip_bin_bytes)

        assert ip_bin.hardware_id == 'SEGA SEGAKATANA'
        assert ip_bin.maker_id == 'SEGA ENTERPRISES'
        assert ip_bin.disc == 1
        assert ip_bin.total_discs == 1
        assert ip_bin.product_number == 'MK-51000'
        assert ip_bin.product_version == 'V1.005'
        assert ip_bin.release_date == date(1999, 9, 9)
        assert ip_bin.boot_filename == '1ST_READ.BIN'
        assert ip_bin.producer == 'SEGA ENTERPRISES'
        assert ip_bin.software_name == 'SONIC ADVENTURE'

    def test_regions(self, ip_bin_bytes):
        ip_bin = IPBin.decode(ip_bin_bytes)
        assert ip_bin.regions == b'JUE     '
        assert ip_bin.regions.is_japan() and ip_bin.regions.is_usa() and ip_bin.regions.is_europe()

        ip_bin = IPBin.decode(make_ip_bin(area='J'))
        assert ip_bin.regions.is_japan()
        assert not ip_bin.regions.is_usa()
        assert not ip_bin.regions.is_europe()

    def test_peripherals(self, ip_bin_bytes):
        ip_bin = IPBin.decode(ip_bin_bytes)
        assert ip_bin.peripherals == 0x0799A10
        assert ip_bin.has_peripheral(Peripheral.VGA_BOX)
        assert ip_bin.has_peripheral(Peripheral.VIBRATION_PACK)
        assert ip_bin.has_peripheral(Peripheral.MEMORY_CARD)
        assert not ip_bin.has_peripheral(Peripheral.WINDOWS_CE)
        assert not ip_bin.has_peripheral(Peripheral.MICROPHONE)

    def test_crc(self, ip_bin_bytes):
        ip_bin = IPBin.decode(ip_bin_bytes)
        assert ip_bin.verify_crc()
        assert ip_bin.crc == ip_bin.calculate_crc()

    def test_crc_is_not_verified_while_decoding(self):
        ip_bin = IPBin.decode(make_ip_bin(crc='0000'))
        assert ip_bin.crc == 0
        assert not ip_bin.verify_crc()

    def test_crc_must_be_hex(self):
        with pytest.raises(ValueError):
            IPBin.decode(make_ip_bin(crc='WXYZ'))

    @pytest.mark.parametrize('crc', ['    ', '  AB', 'AB  '])
    def test_crc_must_be_four_hex_digits(self, crc):
        """Blank or partly blank integrity codes are rejected."""
        with pytest.raises(ValueError):
            IPBin.decode(make_ip_bin(crc=crc))

    @pytest.mark.parametrize('peripherals', ['       ', ' 799A10', '0799A1 '])
    def test_peripherals_must_be_seven_hex_digits(self, peripherals):
        with pytest.raises(ValueError):
            IPBin.decode(make_ip_bin(peripherals=peripherals))

    def test_multi_disc(self):
        ip_bin = IPBin.decode(make_ip_bin(disc='GD-ROM2/3'))
        assert (ip_bin.disc, ip_bin.total_discs) == (2, 3)

    def test_bad_disc_numbering(self):
        with pytest.raises(IPBinFormatError):
            IPBin.decode(make_ip_bin(disc='CD-ROM1/1'))

    @pytest.mark.parametrize('text', ['1999099', 'SEPTEMBR', ''])
    def test_bad_release_date(self, text):
        with pytest.raises(IPBinFormatError):
            IPBin.decode(make_ip_bin(date=text))

    def test_impossible_release_date(self):
        with pytest.raises(ValueError):
            IPBin.decode(make_ip_bin(date='19991399'))

    def test_single_entry_toc(self, ip_bin_bytes):
        ip_bin = IPBin.decode(ip_bin_bytes)
        assert len(ip_bin.toc) == 1
        entry = ip_bin.toc[0]
        assert entry.start == 45000
        assert entry.length == LAST_SECTOR - 45000 - 150
        assert entry.is_data_track()

    def test_toc_lengths_and_stop(self):
        toc = ((45000, 0x41), (50000, 0x01), (60000, 0x41), (70000, 0x99), (80000, 0x41))
        ip_bin = IPBin.decode(make_ip_bin(toc=toc))

        assert [(e.start, e.type) for e in ip_bin.toc] == [(45000, 0x41), (50000, 0x01), (60000, 0x41)]
        assert ip_bin.toc[0].length == 50000 - 45000 - 150
        assert ip_bin.toc[1].length == 60000 - 50000 - 150
        assert ip_bin.toc[1].is_audio_track()
        assert ip_bin.toc[2].length == LAST_SECTOR - 60000 - 150

    def test_empty_toc(self):
        assert IPBin.decode(make_ip_bin(toc=())).toc == []

    def test_field_table_stays_inside_header(self):
        for _, offset, length, _ in IPBIN_FIELDS:
            assert 0 <= offset and offset + length <= 0x100
